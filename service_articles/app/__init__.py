"""
Articles Service package.

A small publishing service hosting the authorization engine. It shows
the pieces working together:

- app.models: Users and the resources they act on.
- app.store: In-memory storage exposed through the three lookup shapes.
- app.main: API surface, ability definition and route conditions.
"""
