from __future__ import annotations

import uvicorn

from practice_desk.core.env import PORT, get_env_int
from practice_desk.web.app import create_app

app = create_app()


def run() -> None:
    port = get_env_int(PORT, 8000, min_value=1)
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=False)


if __name__ == "__main__":
    run()
