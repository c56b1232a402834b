"""
Application package initializer.

The API is organised into ``core`` (configuration, database, security,
errors, logging), ``schemas`` (request/response models), ``services``
(business logic over MongoDB) and ``api`` (versioned routers).
"""
