def _unit(n: int, name: str) -> str:
    return f"{n} {name} " if n == 1 else f"{n} {name}s "

def humanize_ms(ms: int) -> str:
    """Render a run duration the way the summary block prints it.

    Under a second: "<n> millisecond(s)". Otherwise hours/minutes/seconds of a
    UTC clock (hours wrap at 24, leftover milliseconds ignored); minutes are
    shown whenever hours are, and every segment keeps its trailing space.
    """
    ms = int(ms)
    if ms < 1000:
        return f"{ms} millisecond" if ms == 1 else f"{ms} milliseconds"
    total_s = ms // 1000
    hours = total_s // 3600 % 24
    minutes = total_s // 60 % 60
    seconds = total_s % 60
    ret = ""
    if hours:
        ret += _unit(hours, "hour")
    if minutes or hours > 0:
        ret += _unit(minutes, "minute")
    ret += _unit(seconds, "second")
    return ret
