import traceback


def decode_exception(exception: BaseException) -> dict:
    """
    Extrai as informações de uma exceção para o contexto de um log estruturado.

    O local reportado (função, arquivo e linha) é o frame onde a exceção foi
    lançada.
    """
    frames = traceback.extract_tb(exception.__traceback__)

    if frames:
        origin = frames[-1]
        function, file, line = origin.name, origin.filename, origin.lineno
    else:
        function, file, line = "main", "unknown", 0

    return {
        "type": type(exception).__name__,
        "message": str(exception),
        "function": function,
        "file": file,
        "line": line,
        "backtrace_string": "".join(traceback.format_exception(type(exception), exception, exception.__traceback__)),
    }
