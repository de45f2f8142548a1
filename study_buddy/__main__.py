from __future__ import annotations

import logging
import os

import uvicorn
from dotenv import load_dotenv

from study_buddy.config import Settings
from study_buddy.main import create_app


def main() -> None:
    load_dotenv(".env.local")
    load_dotenv()
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(settings, dict(os.environ))
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
