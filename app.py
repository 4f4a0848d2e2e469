from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent
if str(REPO_ROOT / "src" / "payroll_console") not in sys.path:
    sys.path.insert(0, str(REPO_ROOT / "src" / "payroll_console"))

from payroll_console.main import create_app

app = create_app()

if __name__ == "__main__":
    app.run(debug=app.config["DEBUG"])
