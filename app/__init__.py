"""
GamePulse application package.

Layered architecture:

  app/repositories/  pure data access over a caller-owned SQLAlchemy session.
  app/services/      business logic: validation, domain rules, transaction scoping.

``gamepulse_server.create_app`` is the integration point: it configures the
database, builds one instance of each service and stores them on the Flask
app.  Route handlers open a session per request, call exactly one service
and serialise the result; services raise :mod:`app.errors` exceptions that a
single error handler turns into ``{"error": ...}`` responses.
"""
