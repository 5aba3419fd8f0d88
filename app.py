# gunicorn entry point:
#   gunicorn -w 2 -b 127.0.0.1:8082 app:app
from factorkit.web import create_app

app = create_app()

if __name__ == "__main__":
    app.run("127.0.0.1", 8082, debug=True)
