"""
Reports App - PDF Export

Renders a property's transactions as a downloadable PDF statement.
"""
