"""Entry point for running Code Detective as a module.

Usage:
    python -m code_detective [command] [options]

Example:
    python -m code_detective analyze app.py --context "focus on security"
    python -m code_detective export reports/code-review-report.json --format markdown
"""

from code_detective.cli import app

if __name__ == "__main__":
    app()
