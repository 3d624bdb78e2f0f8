from nativebuild.utils.environment import Environment

OWN_NAME = "nativebuild"
""" Search path entries containing this string belong to nativebuild itself """


def native_image_classpath(compile_path: str, environment: Environment = None, own_name: str = OWN_NAME) -> str:
    """
    Returns the search path of the current process without the entries of nativebuild itself
    and with the compile path as its first entry.

    :param compile_path: scratch directory that contains the compiled modules
    :param environment: environment that provides the search path
    :param own_name: entries containing this string are removed
    """
    environment = environment or Environment()
    sep = environment.path_separator
    entries = [entry for entry in environment.search_path().split(sep) if entry and own_name not in entry]
    return sep.join([compile_path] + entries)
