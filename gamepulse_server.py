#!/usr/bin/env python3
"""
GamePulse Server - JSON API for the GamePulse game library tracker and blog.
Serves the /api endpoints and, when a page directory is present, the
front-end pages.
"""

import argparse
import logging
import os
from typing import Dict, Optional

from dotenv import load_dotenv
from flask import (
    Blueprint, Flask, Response, abort, current_app, jsonify, request,
    send_from_directory,
)
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

import database
from app import roles
from app.credentials import CredentialStore
from app.errors import GamePulseError
from app.logging_utils import setup_logging
from app.seed import seed_default_accounts
from app.services import (
    ActivityService, BlogService, LibraryService, SessionLogService,
    StatsService, UserService,
)

load_dotenv()

server_logger = logging.getLogger('gamepulse.server')

NOT_FOUND_PAGE = """<html>
  <head><title>GamePulse - Page Not Found</title></head>
  <body style="background: #0a0a0a; color: white; font-family: Arial; text-align: center; padding: 50px;">
    <h1>🎮 Page Not Found</h1>
    <p>The page you're looking for doesn't exist.</p>
    <a href="/" style="color: #00ff88;">Return to GamePulse</a>
  </body>
</html>
"""


class Services:
    """One instance of every service, shared by all requests of an app."""

    def __init__(self, credentials: CredentialStore) -> None:
        self.users = UserService(credentials)
        self.library = LibraryService()
        self.sessions = SessionLogService()
        self.blogs = BlogService()
        self.stats = StatsService(self.library)
        self.activity = ActivityService()


def _services() -> Services:
    return current_app.extensions['gamepulse']


def _json_body() -> Dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


api_bp = Blueprint('api', __name__, url_prefix='/api')


@api_bp.route('/status')
def api_status():
    """Report whether the database answers."""
    db_ok = True
    try:
        with database.session_scope() as db:
            db.execute(text('SELECT 1'))
    except SQLAlchemyError as e:
        server_logger.warning('Database health check failed: %s', e)
        db_ok = False
    return jsonify({'status': 'ok', 'database': db_ok})


# ===========================================================================================
# User Endpoints
# ===========================================================================================

@api_bp.route('/users/register', methods=['POST'])
def api_users_register():
    """Register a new user"""
    data = _json_body()
    server_logger.info('Register endpoint called for email=%s', data.get('email'))
    with database.session_scope() as db:
        user = _services().users.register(
            db, data.get('email'), data.get('password'), data.get('name'), data.get('role'))
    return jsonify(user)


@api_bp.route('/users/login', methods=['POST'])
def api_users_login():
    """Log in a user"""
    data = _json_body()
    with database.session_scope() as db:
        user = _services().users.login(db, data.get('email'), data.get('password'))
    server_logger.info('User logged in: %s', user['id'])
    return jsonify(user)


@api_bp.route('/users')
def api_users_list():
    """Get all registered users, newest first"""
    with database.session_scope() as db:
        return jsonify(_services().users.list_public(db))


@api_bp.route('/users/<int:user_id>/stats')
def api_user_stats(user_id: int):
    """Get headline statistics for a user"""
    with database.session_scope() as db:
        return jsonify(_services().stats.compute_stats(db, user_id))


@api_bp.route('/users/<int:user_id>/gaming-stats')
def api_user_gaming_stats(user_id: int):
    """Get the gaming statistics widget data (never fails)"""
    with database.session_scope() as db:
        return jsonify(_services().stats.compute_gaming_stats(db, user_id))


@api_bp.route('/users/<int:user_id>/blogs')
def api_user_blogs(user_id: int):
    """Get every post written by a user"""
    with database.session_scope() as db:
        posts = _services().blogs.list_for_user(db, user_id)
        return jsonify([p.to_dict() for p in posts])


@api_bp.route('/users/<int:user_id>/role', methods=['PUT'])
def api_user_role(user_id: int):
    """Change a user's role"""
    data = _json_body()
    with database.session_scope() as db:
        user = _services().users.change_role(db, user_id, data.get('role'))
    return jsonify(user)


@api_bp.route('/users/<int:user_id>', methods=['DELETE'])
def api_user_delete(user_id: int):
    """Delete a user and everything they own"""
    with database.session_scope() as db:
        user = _services().users.delete_user(db, user_id)
    return jsonify({'message': 'User deleted successfully', 'user': user})


@api_bp.route('/roles')
def api_roles():
    """List roles with their labels and permissions"""
    return jsonify(roles.catalogue())


# ===========================================================================================
# Library Endpoints
# ===========================================================================================

@api_bp.route('/games')
def api_games_list():
    """Get a user's library, most recently added first"""
    with database.session_scope() as db:
        games = _services().library.list_games(db, request.args.get('user_id'))
        return jsonify([g.to_dict() for g in games])


@api_bp.route('/games', methods=['POST'])
def api_games_add():
    """Add a game to a user's library"""
    data = _json_body()
    with database.session_scope() as db:
        game = _services().library.add_game(
            db, data.get('user_id'), data.get('title'),
            platform=data.get('platform'), genre=data.get('genre'), cover=data.get('cover'))
        return jsonify(game.to_dict())


@api_bp.route('/games/<int:game_id>', methods=['PUT'])
def api_games_update(game_id: int):
    """Replace a game's editable fields"""
    with database.session_scope() as db:
        game = _services().library.update_game(db, game_id, _json_body())
        return jsonify(game.to_dict())


@api_bp.route('/games/<int:game_id>', methods=['DELETE'])
def api_games_delete(game_id: int):
    """Remove a game from its library"""
    with database.session_scope() as db:
        game = _services().library.delete_game(db, game_id)
    return jsonify({'message': 'Game deleted successfully', 'game': game})


@api_bp.route('/games/<int:game_id>/playtime', methods=['POST'])
def api_games_playtime(game_id: int):
    """Log a play session against a game"""
    data = _json_body()
    with database.session_scope() as db:
        game, session = _services().library.log_playtime(
            db, game_id, data.get('hours'), data.get('user_id'))
        return jsonify({
            'message': 'Playtime logged successfully',
            'game': game.to_dict(),
            'session': session.to_dict(),
        })


@api_bp.route('/games/<int:game_id>/sessions')
def api_games_sessions(game_id: int):
    """List the sessions logged for a game, newest first"""
    services = _services()
    with database.session_scope() as db:
        services.library.get_game(db, game_id)
        sessions = services.sessions.list_for_game(db, game_id)
        return jsonify([s.to_dict() for s in sessions])


# ===========================================================================================
# Blog & Activity Endpoints
# ===========================================================================================

@api_bp.route('/blogs')
def api_blogs_list():
    """Get published posts with their authors, newest first"""
    with database.session_scope() as db:
        return jsonify(_services().blogs.list_published(db))


@api_bp.route('/blogs', methods=['POST'])
def api_blogs_create():
    """Publish a blog post"""
    data = _json_body()
    with database.session_scope() as db:
        post = _services().blogs.create(
            db, data.get('user_id'), data.get('title'), data.get('content'),
            category=data.get('category'), tags=data.get('tags'))
        return jsonify(post.to_dict())


@api_bp.route('/activity/<int:user_id>')
def api_activity(user_id: int):
    """Get the user's 50 most recent library and playtime events"""
    with database.session_scope() as db:
        return jsonify(_services().activity.build_feed(db, user_id))


# ===========================================================================================
# API Documentation
# ===========================================================================================

@api_bp.route('/openapi.json')
def api_openapi_spec():
    """Serve the OpenAPI 3.0 specification as JSON."""
    from openapi_spec import build_spec
    server_url = request.url_root.rstrip('/')
    return jsonify(build_spec(server_url=server_url))


@api_bp.route('/docs')
def api_swagger_ui():
    """Serve an interactive Swagger UI for the GamePulse REST API."""
    openapi_url = '/api/openapi.json'
    html = f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>GamePulse API Documentation</title>
  <link rel="stylesheet"
        href="https://unpkg.com/swagger-ui-dist@5/swagger-ui.css">
</head>
<body>
  <div id="swagger-ui"></div>
  <script src="https://unpkg.com/swagger-ui-dist@5/swagger-ui-bundle.js"></script>
  <script>
    SwaggerUIBundle({{
      url: "{openapi_url}",
      dom_id: "#swagger-ui"
    }});
  </script>
</body>
</html>
"""
    return Response(html, mimetype='text/html')


# ===========================================================================================
# Pages & Error Handling
# ===========================================================================================

def _register_pages(app: Flask) -> None:
    """Serve ``index.html`` at ``/`` and ``<page>.html`` at ``/<page>``."""

    def send_page(filename: str):
        return send_from_directory(app.config['GAMEPULSE_STATIC_DIR'], filename)

    @app.route('/')
    def index():
        return send_page('index.html')

    @app.route('/<path:page>')
    def page(page: str):
        if page == 'api' or page.startswith('api/'):
            abort(404)
        last = page.rsplit('/', 1)[-1]
        filename = page if '.' in last else f'{page}.html'
        return send_page(filename)


def _register_error_handlers(app: Flask) -> None:

    def is_api_request() -> bool:
        return request.path == '/api' or request.path.startswith('/api/')

    @app.errorhandler(GamePulseError)
    def handle_gamepulse_error(error: GamePulseError):
        return jsonify({'error': error.message}), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_store_error(error: SQLAlchemyError):
        server_logger.error('Unhandled store error on %s %s: %s',
                            request.method, request.path, error)
        return jsonify({'error': 'Internal server error'}), 500

    @app.errorhandler(404)
    def handle_not_found(error):
        if is_api_request():
            return jsonify({'error': 'API route not found'}), 404
        return Response(NOT_FOUND_PAGE, status=404, mimetype='text/html')

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        if is_api_request():
            return jsonify({'error': 'Method not allowed'}), 405
        return error.get_response()

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        if isinstance(error, HTTPException):
            if is_api_request():
                return jsonify({'error': error.description}), error.code
            return error
        server_logger.exception('Unhandled error on %s %s', request.method, request.path)
        return jsonify({'error': 'Internal server error'}), 500


def create_app(database_url: Optional[str] = None, bcrypt_rounds: Optional[int] = None,
               seed_demo: Optional[bool] = None, static_dir: Optional[str] = None) -> Flask:
    """Create the GamePulse Flask application.

    Args:
        database_url:  SQLAlchemy URL; defaults to ``DATABASE_URL``.
        bcrypt_rounds: Password work factor; defaults to
                       ``GAMEPULSE_BCRYPT_ROUNDS`` (12).
        seed_demo:     Create bootstrap accounts; defaults to
                       ``GAMEPULSE_SEED_DEMO`` (on).
        static_dir:    Directory of front-end pages; defaults to
                       ``GAMEPULSE_STATIC_DIR`` (``public``).
    """
    app = Flask(__name__, static_folder=None)
    app.config['GAMEPULSE_STATIC_DIR'] = os.path.abspath(
        static_dir or os.getenv('GAMEPULSE_STATIC_DIR', 'public'))

    database.configure(database_url)
    db_ready = database.init_db()
    if db_ready:
        server_logger.info('Database initialized successfully')
    else:
        server_logger.warning('Database initialization reported failure')

    services = Services(CredentialStore(bcrypt_rounds))
    app.extensions['gamepulse'] = services

    if seed_demo is None:
        seed_demo = os.getenv('GAMEPULSE_SEED_DEMO', '1') == '1'
    if seed_demo and db_ready:
        with database.session_scope() as db:
            try:
                seed_default_accounts(db, services.users)
            except GamePulseError as e:
                server_logger.warning('Could not seed bootstrap accounts: %s', e)

    app.register_blueprint(api_bp)
    _register_pages(app)
    _register_error_handlers(app)
    return app


def main():
    """Main entry point for the server"""
    parser = argparse.ArgumentParser(description='GamePulse API server')
    parser.add_argument('--host', default=os.getenv('GAMEPULSE_HOST', '127.0.0.1'),
                        help='Interface to bind')
    parser.add_argument('--port', type=int, default=int(os.getenv('GAMEPULSE_PORT', '3000')),
                        help='Port to listen on')
    parser.add_argument('--database-url', default=None, help='Override DATABASE_URL')
    parser.add_argument('--static-dir', default=None, help='Directory of front-end pages')
    parser.add_argument('--log-level', default=os.getenv('GAMEPULSE_LOG_LEVEL', 'INFO'),
                        help='DEBUG, INFO, WARNING, ERROR or CRITICAL')
    args = parser.parse_args()

    setup_logging(args.log_level)
    app = create_app(database_url=args.database_url, static_dir=args.static_dir)

    print("\n" + "="*60)
    print("🎮 GamePulse Server is starting...")
    print("="*60)
    print(f"\n  Site: http://{args.host}:{args.port}")
    print(f"  API:  http://{args.host}:{args.port}/api")
    print(f"  Docs: http://{args.host}:{args.port}/api/docs")
    print("\nPress Ctrl+C to stop the server")
    print("="*60 + "\n")

    try:
        app.run(host=args.host, port=args.port, debug=False)
    except KeyboardInterrupt:
        print("\n\n" + "="*60)
        print("🛑 GamePulse Server stopped")
        print("="*60 + "\n")


if __name__ == "__main__":
    main()
