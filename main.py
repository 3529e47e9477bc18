from rich.pretty import pprint

from optline import *
from optline import log

__prog__ = "optline-demo"
__codes__ = {
    FaultCode.UNKNOWN_TRIGGER: "E-TRIGGER",
}

parser = Parser([
    Option("-v", "--verbose", type="none", default=False, description="log every step"),
    Option("-n", "--name", default="world"),
    Option("-t", "--tag", array=True, target="meta.tags"),
    Option("-p", "--port", type="integer", target="server.port", default=8080),
    Option("--mode", map={
        "fast": {"value": "MODE_FAST", "description": "skip checks"},
        "safe": {"value": "MODE_SAFE", "description": "run every check"},
    }),
    {"triggers": ["--extra"], "type": ["json", "string"]},
], shell=True, fancy=True)


if __name__ == '__main__':
    log.install("WARNING")
    pprint(parser.parse())
