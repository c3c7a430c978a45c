from __future__ import annotations
import json
from argparse import ArgumentParser, _SubParsersAction
from ..command import Command
from ..streams import outputln
from . import register


class ShowConfig(Command):
    def execute(self, app) -> None:
        cfg = app.config
        sources = app.sources

        if self.args.format == "json":
            payload = {
                "ok": True,
                "command": "config.show",
                "default_name": cfg.default_name,
                "log_level": cfg.log_level,  # will appear as null if None
            }
            if self.args.with_sources:
                payload["sources"] = {
                    "default_name": sources.get("default_name", "default"),
                    "log_level": sources.get("log_level", "default"),
                }
            outputln(app.streams, json.dumps(payload, ensure_ascii=False, separators=(",", ":")))
            return

        if self.args.with_sources:
            outputln(app.streams, "default_name: {} (source={})", cfg.default_name, sources.get("default_name", "default"))
            outputln(app.streams, "log_level: {} (source={})", cfg.log_level or "", sources.get("log_level", "default"))
        else:
            outputln(app.streams, "default_name: {}", cfg.default_name)
            outputln(app.streams, "log_level: {}", cfg.log_level or "")


@register
def register_config(subparsers: _SubParsersAction) -> None:
    p: ArgumentParser = subparsers.add_parser(
        "config",
        help="Inspect and print effective configuration.",
        description="Show carli configuration derived from defaults, files, and environment.",
    )
    sp = p.add_subparsers(dest="config_cmd", metavar="<subcommand>")
    show = sp.add_parser("show", help="Show effective configuration.")
    show.add_argument("--with-sources", action="store_true", help="Include the source of each value.")
    show.add_argument("--format", choices=["text", "json"], default="text")
    show.set_defaults(command=ShowConfig)
