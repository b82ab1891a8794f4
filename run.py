import os
from skillswap import create_app
from skillswap.config import Config

# Create Flask app instance
app = create_app(Config)

# Log the environment and allowed CORS origins
print(f"[INFO] Running in {'production' if os.getenv('FLASK_ENV') == 'production' else 'development'} mode")
print(f"[INFO] Allowed CORS Origins: {Config.CORS_ORIGINS or '*'}")

if __name__ == '__main__':
    debug_mode = Config.DEBUG
    print(f"[INFO] Debug mode is {'on' if debug_mode else 'off'}")
    app.run(debug=debug_mode, host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
