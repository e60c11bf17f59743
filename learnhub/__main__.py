# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Run the LearnHub API with uvicorn."""

import uvicorn

from learnhub.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "learnhub.api.app:create_app",
        factory=True,
        host=settings.api.host,
        port=settings.api.port,
        workers=settings.api.workers,
        reload=settings.api.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
