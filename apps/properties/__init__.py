"""
Properties App - Real-Estate Scopes

A property is a named container (an apartment, a beach house) that scopes
every transaction query and aggregation. Properties are created explicitly
or seeded on the first listing of an empty store, renamed in place, and
never deleted.
"""
