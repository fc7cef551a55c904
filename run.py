# run.py
# This script launches the Flask hint API.
# Install the project in editable mode (pip install -e .) so 'starbattle_hints' is importable.

from starbattle_hints.app import app

if __name__ == '__main__':
    app.run(host='0.0.0.0', port=5001, debug=True)
