from __future__ import annotations

import os
import sys
from pathlib import Path

SRC = Path(__file__).resolve().parent / "src" / "hostel_attendance"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from hostel_attendance.main import create_app

app = create_app()


if __name__ == "__main__":
    # threaded: each check-in request runs on its own worker thread
    app.run(host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "5000")), threaded=True)
