import sys

from rich.pretty import pprint

from pennant import *

program = Program()
remote = Program()


@program.command("cat", "print files to stdout")
def cat(context):
    positional, optional = arguments()
    number = optional.add(BoolValue(), "-n", "--number", descr="number the output lines")
    files = positional.add(OpenListValue(), "FILE", descr="files to print")
    with positional:
        context.parse(positional, optional)
        for index, line in enumerate((line for file in files for line in file), 1):
            print(f"{index:6}  {line}" if number.value else line, end="")


@remote.command("add", "register a remote")
def add(context):
    positional, optional = arguments()
    name = positional.add(StringValue(), "NAME")
    url = positional.add(StringValue(), "URL")
    retries = optional.add(IntValue(3), "--retries", descr="connection attempts")
    context.parse(positional, optional)
    pprint(dict(context=context, name=name, url=url, retries=retries))


program.add("remote", "manage remotes", remote.compile())


if __name__ == '__main__':
    sys.exit(run("main.py", "pennant demo tool", program.compile(), colorful=True))
