from rich.pretty import pprint

from argroute import *

context = Context("vcs", shell=True, colorful=True)
context.prearg("org", "organization owning the repository")
context.help_command()
context.help_ignores_preargs()

verbose = context.flags.boolean("verbose", "v", descr="log every step")


class Push(Handler):
    def flags(self, flagset, /):
        self.force = flagset.boolean("force", "f", descr="overwrite the remote branch")
        self.remote = flagset.string("remote", default="origin", descr="remote to push to")
        return flagset

    def run(self, args, /):
        pprint({"remote": self.remote.value, "force": self.force.value, "branch": args[0], "paths": args[1:]})


context.on("push", "Push a branch to a remote", Push()).arguments("branch", "...").requires("remote")


@context.command
def status(args):
    """Show the working tree status"""
    if verbose.value:
        pprint(context.state)
    pprint({"org": context.state.preargs["org"], "path": args[0] if args else "."})


status.builder.arguments("[path]")


if __name__ == '__main__':
    context.run()
