"""Configuration CLI commands: inspect registries and check rule sets."""

import click

from welfaretrack.errors import ConfigurationError
from welfaretrack.records.definitions import ENTITY_TYPES, build_entity_rules
from welfaretrack.settings import Settings
from welfaretrack.validation import AttributeRegistry, MessageCatalog
from welfaretrack.validation.patterns import get_pattern, list_patterns, matches


@click.group()
def config():
    """Validation configuration commands."""
    pass


@config.command()
@click.argument("entity", required=False)
def attributes(entity: str | None):
    """List managed attributes and their display names."""
    settings = Settings.from_env()
    registry = AttributeRegistry(settings.config_dir)

    entities = [entity] if entity else registry.available_entities()
    if not entities:
        click.echo(f"No attribute configuration found in {registry.validations_dir}", err=True)
        raise SystemExit(1)

    for name in entities:
        managed = registry.managed_attributes(name)
        click.echo(click.style(f"{name} ({len(managed)} attributes)", bold=True))
        for attribute in managed:
            click.echo(f"  {attribute}: {registry.get_display_name(name, attribute)}")
            choices = registry.get_entity_config(name)[attribute].get("choices_display")
            for value, label in (choices or {}).items():
                click.echo(f"    {value} -> {label}")


@config.command()
@click.option("--locale", default=None, help="Locale to show (default: configured locale).")
def messages(locale: str | None):
    """Show the validation message catalog."""
    settings = Settings.from_env()
    catalog = MessageCatalog(settings.config_dir, default_locale=settings.locale)
    locale = locale or settings.locale

    loaded = catalog.load_messages(locale)
    click.echo(click.style(f"Validation messages ({locale}): {len(loaded)}", bold=True))
    for kind, template in loaded.items():
        click.echo(f"  {kind}: {template!r}")


@config.command()
def patterns():
    """List the registered regex patterns."""
    for name in list_patterns():
        click.echo(f"  {name}: {get_pattern(name).pattern}")


@config.command("test-pattern")
@click.argument("name")
@click.argument("value")
def test_pattern(name: str, value: str):
    """Check VALUE against the pattern NAME."""
    try:
        matched = matches(name, value)
    except ConfigurationError as e:
        click.echo(click.style(str(e), fg="red"), err=True)
        raise SystemExit(1)

    if matched:
        click.echo(click.style(f"'{value}' matches {name}", fg="green"))
    else:
        click.echo(click.style(f"'{value}' does not match {name}", fg="red"))
        raise SystemExit(1)


@config.command()
def check():
    """Build every entity rule set; fail on configuration errors."""
    settings = Settings.from_env()
    registry = AttributeRegistry(settings.config_dir)
    catalog = MessageCatalog(settings.config_dir, default_locale=settings.locale)

    try:
        rule_sets = build_entity_rules(registry, catalog, settings.locale)
    except ConfigurationError as e:
        click.echo(click.style(f"Configuration error:\n{e}", fg="red"), err=True)
        raise SystemExit(1)

    for name in ENTITY_TYPES:
        click.echo(f"  ✓ {name} ({len(rule_sets[name])} rules)")
    click.echo(click.style("\nAll rule sets built.", fg="green", bold=True))
