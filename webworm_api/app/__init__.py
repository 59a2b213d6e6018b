"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules: ``core`` (configuration, logging, the SQLite store),
``schemas`` (request and response models), ``services`` (business
logic) and ``api`` (versioned routers).

The ASGI application is ``webworm_api.app.main:app``.
"""
