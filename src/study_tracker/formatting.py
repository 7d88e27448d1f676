"""Display helpers for study durations and dates."""

from datetime import date

_WEEKDAYS_ZH = ("星期一", "星期二", "星期三", "星期四", "星期五", "星期六", "星期日")


def format_clock(seconds: int) -> str:
    """Format seconds as HH:MM:SS."""
    seconds = max(int(seconds), 0)
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02}:{minutes:02}:{secs:02}"


def format_duration_zh(seconds: int) -> str:
    """Format seconds as hours and minutes in Chinese, dropping seconds."""
    seconds = max(int(seconds), 0)
    hours, remainder = divmod(seconds, 3600)
    return f"{hours}小時{remainder // 60}分"


def format_date_zh(day: date) -> str:
    """Format a date in zh-TW long form with the weekday."""
    return f"{day.year}年{day.month}月{day.day}日 {_WEEKDAYS_ZH[day.weekday()]}"
