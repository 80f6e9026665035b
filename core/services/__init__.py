"""Services for the core app."""

# Note: the engine services are not exported here to avoid importing models
# during Django app initialization. Import directly from the module.
