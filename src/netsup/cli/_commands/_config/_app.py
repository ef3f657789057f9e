"""Config command app."""

from cyclopts import App

app = App(
    name="config",
    help="Inspect, validate and create netsup configuration",
    help_on_error=True,
)
