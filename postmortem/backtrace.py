"""
Chained backtraces with shared frames folded away.

Frames are plain strings ordered most-recent-call-first. A fault's frames are
its own traceback entries followed by the callers that were still on the stack
when it was raised, so a cause and its effect usually end in the same frames.
Only the part of each cause's trace that differs from the previous trace in the
chain is printed; the shared tail is summarized as "... N more".

Caller frames are live objects whose current line has usually moved on since
the fault was raised. When the same frame shows up in the traceback of a later
fault of the chain, that traceback's line is used instead.
"""


def _format(frame, lineno):
    return 'File "%s", line %d, in %s' % (frame.f_code.co_filename, lineno, frame.f_code.co_name)


def _entries(exception):
    tb = getattr(exception, "__traceback__", None)
    entries = []
    while tb is not None:
        entries.append((tb.tb_frame, tb.tb_lineno))
        tb = tb.tb_next
    return entries


def frames(exception, known=None, /):
    """
    the backtrace of an exception, most recent call first.

    `known` maps id(frame) to the line a frame was at in a related traceback;
    callers found there are reported at that line.
    """
    known = known if known is not None else {}
    entries = _entries(exception)
    if not entries:
        return []
    callers = []
    frame = entries[0][0].f_back
    while frame is not None:
        callers.append((frame, known.get(id(frame), frame.f_lineno)))
        frame = frame.f_back
    return [_format(frame, lineno) for frame, lineno in reversed(callers[::-1] + entries)]


def unique_trace(trace, other, /):
    """
    the leading frames of `trace` that are not part of the tail it shares with `other`.

    >>> unique_trace(["f1", "f2", "f3", "s1", "s2"], ["g1", "s1", "s2"])
    ['f1', 'f2', 'f3']
    """
    index = 1
    while index <= len(trace) and index <= len(other):
        if trace[-index] != other[-index]:
            break
        index += 1
    return list(trace[:len(trace) - index + 1])


def causes(exception, /):
    """yield the causal chain below `exception` (explicit cause first, then context)."""
    seen = {id(exception)}
    current = exception
    while True:
        if current.__cause__ is not None:
            current = current.__cause__
        elif current.__context__ is not None and not current.__suppress_context__:
            current = current.__context__
        else:
            return
        if id(current) in seen:
            return
        seen.add(id(current))
        yield current


def _single(out, exception, trace):
    out.write("%s: %s\n" % (type(exception).__qualname__, exception))
    for frame in trace:
        out.write("\t%s\n" % frame)


def render(out, exception, /):
    """write the exception, its trace, and every cause's unique frames to `out`."""
    known = {id(frame): lineno for frame, lineno in _entries(exception)}
    current = frames(exception)
    _single(out, exception, current)
    for cause in causes(exception):
        trace = frames(cause, known)
        unique = unique_trace(trace, current)
        out.write("Caused by: ")
        _single(out, cause, unique)
        if len(trace) > len(unique):
            out.write("\t... %d more" % (len(trace) - len(unique)))
        out.write("\n")
        known.update((id(frame), lineno) for frame, lineno in _entries(cause))
        current = trace


__all__ = (
    "frames",
    "unique_trace",
    "causes",
    "render",
)
