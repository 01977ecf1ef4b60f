from pathlib import Path
from datetime import datetime, date

from fastapi.templating import Jinja2Templates

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

def format_date_filter(value, format_str="%B %d, %Y"):
    if value is None:
        return ""
    if isinstance(value, str):
        try:
            # Try parsing ISO format
            value = datetime.strptime(value[:10], "%Y-%m-%d")
        except ValueError:
            return value
    return value.strftime(format_str)

templates.env.filters["format_date"] = format_date_filter
templates.env.globals["today"] = date.today
