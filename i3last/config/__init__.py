"""
i3last.config - Daemon configuration.

    - settings : Settings dataclass and the command line parser
    - bindings : Which signal triggers which event
"""
