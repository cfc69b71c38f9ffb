# livewithdesigns/wsgi.py
from livewithdesigns.app import create_app

# For gunicorn
app = create_app()


if __name__ == "__main__":
    app.run(debug=True)
