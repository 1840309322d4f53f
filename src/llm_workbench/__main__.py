import os

import uvicorn
from dotenv import load_dotenv

from .settings import RuntimeSettings
from .utils.logger import setup_logger


def main():
    load_dotenv(".env", override=False)
    settings = RuntimeSettings.from_env()
    setup_logger(level=settings.log_level)
    uvicorn.run(
        "llm_workbench.app:app",
        host=os.getenv("WORKBENCH_HOST", "127.0.0.1"),
        port=int(os.getenv("WORKBENCH_PORT", "8765")),
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
