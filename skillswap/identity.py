from flask_jwt_extended import create_access_token, create_refresh_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import InvalidTokenError
from sqlalchemy import text

from skillswap import bcrypt
from skillswap.errors import Conflict, InvalidCredential, Unauthenticated, parse_payload
from skillswap.schemas import ExternalProfile, LoginRequest, RegisterRequest
from skillswap.store import fetch_one, transaction

USER_COLUMNS = "id, email, name, photo, location, bio, created_at"


class IdentityService:
    """
    Accounts and credentials.

    Passwords are stored as bcrypt hashes; callers receive a short-lived
    access token and a longer-lived refresh token, both signed JWTs whose
    subject is the user id.
    """

    def __init__(self, session, config):
        self.session = session
        self.config = config

    def register(self, data):
        payload = parse_payload(RegisterRequest, data)

        # Check if the user already exists
        existing = fetch_one(self.session, "SELECT id FROM users WHERE email = :email", {'email': payload.email})
        if existing:
            raise Conflict('User already exists')

        password_hash = bcrypt.generate_password_hash(
            payload.password, self.config['BCRYPT_LOG_ROUNDS']
        ).decode('utf-8')
        insert_query = """
        INSERT INTO users (name, email, password_hash, location, bio)
        VALUES (:name, :email, :password_hash, :location, :bio);
        """
        with transaction(self.session, 'Failed to create user', conflict_message='User already exists'):
            result = self.session.execute(text(insert_query), {
                'name': payload.name,
                'email': payload.email,
                'password_hash': password_hash,
                'location': payload.location,
                'bio': payload.bio,
            })
            user_id = result.lastrowid

        print(f"[DEBUG] Registered user {user_id} ({payload.email})")
        return self._session_payload(self.get_user(user_id))

    def login(self, data):
        payload = parse_payload(LoginRequest, data)

        user = fetch_one(
            self.session,
            "SELECT id, password_hash FROM users WHERE email = :email",
            {'email': payload.email},
        )
        # Accounts created through the external provider have no password
        if not user or not user['password_hash']:
            raise Unauthenticated('Invalid credentials')
        if not bcrypt.check_password_hash(user['password_hash'], payload.password):
            raise Unauthenticated('Invalid credentials')

        return self._session_payload(self.get_user(user['id']))

    def login_external(self, data):
        """Log in with a provider profile, creating the account on first use.

        Returns the session payload and whether a new user was created.
        """
        profile = parse_payload(ExternalProfile, data)

        user = fetch_one(self.session, "SELECT id FROM users WHERE email = :email", {'email': profile.email})
        if user:
            return self._session_payload(self.get_user(user['id'])), False

        insert_query = """
        INSERT INTO users (name, email, photo, google_id)
        VALUES (:name, :email, :photo, :google_id);
        """
        with transaction(self.session, 'Failed to create user', conflict_message='User already exists'):
            result = self.session.execute(text(insert_query), {
                'name': profile.name,
                'email': profile.email,
                'photo': profile.picture,
                'google_id': profile.id,
            })
            user_id = result.lastrowid

        print(f"[DEBUG] Created user {user_id} from external provider profile")
        return self._session_payload(self.get_user(user_id)), True

    def resolve(self, access_token):
        """Return the user an access token belongs to."""
        try:
            decoded = decode_token(access_token)
        except (InvalidTokenError, JWTExtendedException) as e:
            print(f"[DEBUG] Rejected token: {e}")
            raise InvalidCredential('Invalid or expired token') from e

        if decoded.get('type') != 'access':
            raise InvalidCredential('Invalid or expired token')

        user = self.get_user(int(decoded['sub']))
        if not user:
            raise InvalidCredential('User not found')
        return user

    def get_user(self, user_id):
        return fetch_one(self.session, f"SELECT {USER_COLUMNS} FROM users WHERE id = :user_id", {'user_id': user_id})

    def issue_tokens(self, user_id):
        identity = str(user_id)
        return {
            'accessToken': create_access_token(
                identity=identity, expires_delta=self.config['JWT_ACCESS_TOKEN_EXPIRES']
            ),
            'refreshToken': create_refresh_token(
                identity=identity, expires_delta=self.config['JWT_REFRESH_TOKEN_EXPIRES']
            ),
        }

    def _session_payload(self, user):
        return {'user': user, **self.issue_tokens(user['id'])}
