"""
Service layer abstraction.

Each service encapsulates business logic for a domain and is built
around a MongoDB database handle injected by the API layer, so the
same objects can run against a real server or an in-memory client.
"""
