import sqlite3

from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from sqlalchemy import event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from skillswap.errors import SkillSwapError

# Initialize extensions
db = SQLAlchemy()
bcrypt = Bcrypt()
jwt = JWTManager()


@event.listens_for(Engine, "connect")
def configure_sqlite_connection(dbapi_connection, connection_record):
    """
    SQLite ignores REFERENCES clauses unless asked per connection, and its
    LOWER() only folds ASCII, so searches use a Python casefold instead.
    """
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        dbapi_connection.create_function("casefold", 1, casefold, deterministic=True)


def casefold(value):
    return value.casefold() if isinstance(value, str) else value


def create_app(config_class='skillswap.config.Config'):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    db.init_app(app)
    bcrypt.init_app(app)
    jwt.init_app(app)
    CORS(app, resources={
        r"/*": {
            "origins": app.config.get('CORS_ORIGINS') or "*",
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Authorization", "Content-Type"],
        }
    })

    register_error_handlers(app)

    # Create tables if they don't exist
    with app.app_context():
        create_tables()

    # Import and register Blueprints
    from skillswap.auth_routes import auth_bp
    from skillswap.skill_routes import skill_bp
    from skillswap.swap_routes import swap_bp
    from skillswap.review_routes import review_bp
    from skillswap.user_routes import user_bp

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(skill_bp, url_prefix='/skills')
    app.register_blueprint(swap_bp, url_prefix='/swaps')
    app.register_blueprint(review_bp, url_prefix='/reviews')
    app.register_blueprint(user_bp, url_prefix='/users')

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({'status': 'ok'}), 200

    return app


def register_error_handlers(app):
    @app.errorhandler(SkillSwapError)
    def handle_skillswap_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        print(f"[ERROR] Unhandled database error: {error}")
        db.session.rollback()
        return jsonify({'error': 'Database error'}), 500


def create_tables():
    table_creation_statements = [
        """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            email TEXT UNIQUE NOT NULL,
            password_hash TEXT,
            google_id TEXT UNIQUE,
            name TEXT NOT NULL,
            photo TEXT,
            location TEXT,
            bio TEXT,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
        );
        """,
        """
        CREATE TABLE IF NOT EXISTS skills (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            title TEXT NOT NULL,
            description TEXT,
            category TEXT NOT NULL,
            skill_type TEXT NOT NULL CHECK (skill_type IN ('offered', 'wanted')),
            level TEXT CHECK (level IN ('beginner', 'intermediate', 'advanced')),
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP
        );
        """,
        """
        CREATE TABLE IF NOT EXISTS availability (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            day_of_week INTEGER NOT NULL CHECK (day_of_week BETWEEN 0 AND 6),
            start_time TEXT NOT NULL,
            end_time TEXT NOT NULL
        );
        """,
        """
        CREATE TABLE IF NOT EXISTS swap_requests (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            requester_id INTEGER NOT NULL REFERENCES users(id),
            provider_id INTEGER NOT NULL REFERENCES users(id),
            offered_skill_id INTEGER NOT NULL REFERENCES skills(id),
            wanted_skill_id INTEGER NOT NULL REFERENCES skills(id),
            message TEXT,
            status TEXT NOT NULL DEFAULT 'pending'
                CHECK (status IN ('pending', 'accepted', 'rejected', 'completed', 'cancelled')),
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
        );
        """,
        """
        CREATE TABLE IF NOT EXISTS reviews (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            swap_request_id INTEGER NOT NULL REFERENCES swap_requests(id),
            reviewer_id INTEGER NOT NULL REFERENCES users(id),
            reviewee_id INTEGER NOT NULL REFERENCES users(id),
            rating INTEGER NOT NULL CHECK (rating BETWEEN 1 AND 5),
            feedback TEXT,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP
        );
        """,
        """
        CREATE UNIQUE INDEX IF NOT EXISTS unique_review_per_reviewer
        ON reviews (swap_request_id, reviewer_id);
        """,
    ]

    for statement in table_creation_statements:
        db.session.execute(text(statement))
    db.session.commit()
