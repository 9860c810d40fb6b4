import os

from dotenv import load_dotenv

load_dotenv()

from estatedesk import create_app

app = create_app(os.getenv("APP_ENV", "development"))


if __name__ == "__main__":
    host = os.getenv("FLASK_RUN_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_RUN_PORT", 5000))
    app.run(host=host, port=port, debug=app.config.get("DEBUG", False))
