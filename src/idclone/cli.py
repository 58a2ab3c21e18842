"""Click command for the idclone CLI."""

import logging

import click

from idclone.bootstrap import BootstrapOpts, Collaborators, bootstrap, local_path_for
from idclone.prompts import AutoPrompter, Prompter
from idclone.remote import parse_remote
from idclone.settings import SSH_CONFIG_ENVVAR, SSH_DIR_ENVVAR, Settings


def _looks_like_email(value):
    return "@" in value and ":" not in value and "/" not in value and not value.startswith("git ")


def assign_positionals(positionals, email, remote):
    """Match positional arguments to identity and remote, in either order.

    Returns:
        (email, remote)

    Raises:
        click.UsageError: A value is given twice, or one is missing.
    """
    emails = [p for p in positionals if _looks_like_email(p)]
    remotes = [p for p in positionals if not _looks_like_email(p)]
    if len(emails) > 1:
        raise click.UsageError(f"More than one identity given: {', '.join(emails)}")
    if len(remotes) > 1:
        raise click.UsageError(f"More than one remote given: {', '.join(remotes)}")

    if emails:
        if email:
            raise click.UsageError("Identity given both as an argument and with --email")
        email = emails[0]
    if remotes:
        if remote:
            raise click.UsageError("Remote given both as an argument and with --remote")
        remote = remotes[0]

    if not email:
        raise click.UsageError("Missing identity: pass an email address or --email")
    if not remote:
        raise click.UsageError("Missing remote: pass a repository URL, a clone command or --remote")
    return email, remote


def _parse_ssh_options(ctx, param, values):
    overrides = {}
    for value in values:
        key, sep, field_value = value.partition("=")
        key = key.strip()
        if not sep or not key or any(c.isspace() for c in key):
            raise click.BadParameter(f"expected KEY=VALUE, got {value!r}", ctx=ctx, param=param)
        overrides[key] = field_value.strip()
    return overrides


def _configure_logging(debug):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("positionals", nargs=-1, metavar="[IDENTITY] [REMOTE]")
@click.option("-e", "--email", help="Email address the workspace is bound to.")
@click.option("-r", "--remote", help="Repository URL or `git clone ...` command.")
@click.option("-p", "--path", "local_path", help="Directory to clone into.")
@click.option("-k", "--key", "key_path", help="Existing SSH key to use instead of a managed one.")
@click.option(
    "-o", "--ssh-option", "ssh_options", multiple=True, callback=_parse_ssh_options,
    metavar="KEY=VALUE", help="SSH config field for the profile (repeatable).",
)
@click.option("-y", "--yes", "assume_yes", is_flag=True, help="Accept the default answer to every question.")
@click.option("--ssh-dir", envvar=SSH_DIR_ENVVAR, help="Directory for managed keys [default: ~/.ssh].")
@click.option("--ssh-config", envvar=SSH_CONFIG_ENVVAR, help="SSH config file [default: <ssh-dir>/config].")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.version_option(package_name="idclone")
def main(positionals, email, remote, local_path, key_path, ssh_options, assume_yes, ssh_dir, ssh_config, debug):
    """Set up an SSH identity for a remote host and clone a repository with it.

    IDENTITY is an email address; REMOTE is a repository URL
    (git@github.com:org/repo.git, https://github.com/org/repo.git,
    github.com/org/repo.git) or a full `git clone` command.
    """
    _configure_logging(debug)

    if len(positionals) > 2:
        raise click.UsageError(f"Unexpected arguments: {' '.join(positionals[2:])}")
    email, remote = assign_positionals(positionals, email, remote)
    target = parse_remote(remote)

    opts = BootstrapOpts(
        email=email,
        remote_host=target.host,
        remote_path=target.path,
        local_path=local_path_for(target, local_path),
        explicit_key_path=key_path,
        field_overrides={**target.ssh_overrides(), **ssh_options},
    )
    prompter = AutoPrompter() if assume_yes else Prompter()
    collaborators = Collaborators.build(Settings.build(ssh_dir, ssh_config), prompter)

    result = bootstrap(opts, collaborators)

    workspace = result.workspace
    identity = result.commit_identity
    click.secho(f"Workspace ready: {workspace.local_path}", fg="green")
    click.echo(f"  remote: {workspace.qualified_url}")
    click.echo(f"  author: {identity.display_name} <{identity.email}>")
