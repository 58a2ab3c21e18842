"""Provisioning pipeline: key and profile, clone, then commit identity."""

import logging
import os
from dataclasses import dataclass, field

import click

from idclone.identity import CommitIdentity, Identity
from idclone.ssh.key_store import KeyStore
from idclone.ssh.profile_registry import ProfileRegistry
from idclone.ssh.profile_resolver import ProfileResolver, ResolvedProfile
from idclone.workspace.clone_coordinator import CloneCoordinator, Workspace
from idclone.workspace.git_client import GitClient
from idclone.workspace.identity_attacher import IdentityAttacher

logger = logging.getLogger(__name__)


@dataclass
class BootstrapOpts:
    """Validated arguments for one provisioning run."""

    email: str
    remote_host: str
    remote_path: str
    local_path: str
    explicit_key_path: str | None = None
    field_overrides: dict = field(default_factory=dict)


@dataclass
class Collaborators:
    """The stores, git client and prompter the pipeline runs against."""

    key_store: KeyStore
    registry: ProfileRegistry
    git_client: GitClient
    prompter: object

    @classmethod
    def build(cls, settings, prompter, key_generator=None, git_client=None) -> "Collaborators":
        return cls(
            key_store=KeyStore(settings.ssh_dir, key_generator),
            registry=ProfileRegistry(settings.ssh_config_path),
            git_client=git_client or GitClient(),
            prompter=prompter,
        )


@dataclass
class BootstrapResult:
    profile: ResolvedProfile
    workspace: Workspace
    commit_identity: CommitIdentity


def _confirm_new_key(resolved, opts, prompter):
    prompter.echo()
    prompter.echo(f"Generated a new SSH key for {opts.email}: {resolved.key.key_path}")
    prompter.echo(f"Add this public key to your account on {opts.remote_host}:")
    prompter.echo()
    prompter.echo(resolved.key.read_public_key())
    prompter.echo()
    if not prompter.confirm("Has the key been added?"):
        raise click.Abort()


def bootstrap(opts: BootstrapOpts, collaborators: Collaborators) -> BootstrapResult:
    """Provision a workspace for opts.email cloned from opts.remote_host.

    Steps run in order and stop at the first failure; steps already done
    (a generated key, an appended profile) are left in place.
    """
    identity = Identity(opts.email)
    prompter = collaborators.prompter

    resolver = ProfileResolver(collaborators.key_store, collaborators.registry)
    resolved = resolver.resolve(
        identity,
        opts.remote_host,
        explicit_key_path=opts.explicit_key_path,
        field_overrides=opts.field_overrides,
    )
    click.secho(f"SSH profile: {resolved.name}", fg="cyan", err=True)
    if resolved.is_preexisting:
        click.echo("Key and profile were already configured.", err=True)
    if resolved.key.was_generated:
        _confirm_new_key(resolved, opts, prompter)

    coordinator = CloneCoordinator(collaborators.git_client)
    workspace = coordinator.clone(resolved.name, opts.remote_path, opts.local_path)
    if workspace.already_provisioned:
        click.echo(f"{workspace.local_path} is already cloned from {workspace.qualified_url}", err=True)

    attacher = IdentityAttacher(collaborators.git_client, prompter)
    commit_identity = attacher.attach(identity, workspace.local_path)
    logger.debug("Attached %s to %s", commit_identity, workspace.local_path)

    return BootstrapResult(profile=resolved, workspace=workspace, commit_identity=commit_identity)


def local_path_for(remote_target, explicit_path=None, cwd=None) -> str:
    """Clone destination: explicit path, else the remote's directory under cwd."""
    base = cwd or os.getcwd()
    return os.path.abspath(os.path.join(base, os.path.expanduser(explicit_path or remote_target.directory)))
