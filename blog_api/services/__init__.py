"""
High-level use cases for the Blog API.

The Store owns every record and the rules around them (id assignment, the
post/comment cleanup rule, the singleton profile). Routers call it instead of
manipulating collections or the snapshot file directly.
"""
