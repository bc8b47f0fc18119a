"""
DriveDoc web layer.

The application is built by web.main.create_app(); routers live in the
*_routes modules, one per resource.
"""
