"""
Service layer abstraction.

Services encapsulate the business logic on top of the bookmark store
and are shared by the HTTP API and the command line interface.
"""
