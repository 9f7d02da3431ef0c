from rich.pretty import pprint

from helmsman import *


def compile_file(definition, file, values):
    pprint({"file": file, "values": values.asdict()})


cli = Definition(
    "tool",
    "Compiles source files into something runnable",
    [
        help_flag,
        FlagOption("-v", "--verbose", help="Prints every step while working"),
    ],
    [
        help_cmd,
        ValueCommand(
            "compile",
            "Compiles a source file",
            [
                ValueOption("-o", "--output", help="Where to write the result"),
                FlagOption("--release", help="Turns on optimizations"),
            ],
            ShowValue("SourceFile", False, "The file to compile"),
            compile_file,
        ),
    ],
)


if __name__ == '__main__':
    process(cli)
