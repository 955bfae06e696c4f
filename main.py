"""Development entrypoint.

Exposes `app` for hosts that look for it in `main.py`, and runs the
built-in server on PORT (default 5015) when executed directly.
"""

import logging

from luckydraw import create_app

app = create_app()


if __name__ == "__main__":
    port = int(app.config["PORT"])
    logging.getLogger(__name__).info("Server is running on port %s", port)
    app.run(host="0.0.0.0", port=port, debug=False)
