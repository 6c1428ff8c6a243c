"""
Merkle Engine Command Line Interface

Provides commands for computing roots, generating inclusion proofs and
verifying them.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import click

from merkle_engine.core.codec import decode_proof, encode_proof, proof_from_json, proof_to_json
from merkle_engine.core.errors import MerkleError, ProofDecodeError
from merkle_engine.core.hashers import DEFAULT_ALGORITHM, Hasher, available_algorithms, get_hasher
from merkle_engine.core.merkle import MerkleTree, verify_proof
from merkle_engine.core.models import Proof

logger = logging.getLogger(__name__)

# Configure click
CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])

PROOF_FORMATS = ['binary', 'hex', 'json']


# Helper functions
def load_leaves(paths: List[str]) -> List[bytes]:
    """Read each file as one leaf, in argument order."""
    leaves = []
    for path in paths:
        try:
            leaves.append(Path(path).read_bytes())
        except OSError as e:
            click.echo(f"Error reading leaf file: {e}", err=True)
            sys.exit(1)
    return leaves


def build_tree(paths: List[str], hasher: Hasher) -> MerkleTree:
    """Build a tree from leaf files."""
    try:
        return MerkleTree(load_leaves(paths), hasher=hasher)
    except MerkleError as e:
        click.echo(f"Error building tree: {e}", err=True)
        sys.exit(1)


def serialize_proof(proof: Proof, fmt: str) -> bytes:
    """Render a proof in the requested output format."""
    if fmt == 'binary':
        return encode_proof(proof)
    if fmt == 'hex':
        return (encode_proof(proof).hex() + '\n').encode('ascii')
    return (proof_to_json(proof) + '\n').encode('utf-8')


def load_proof(file_path: str, fmt: str, digest_size: int) -> Proof:
    """Load a proof from a file in the given format."""
    try:
        raw = Path(file_path).read_bytes()
    except OSError as e:
        click.echo(f"Error reading proof file: {e}", err=True)
        sys.exit(1)

    try:
        if fmt == 'binary':
            return decode_proof(raw, digest_size=digest_size)
        if fmt == 'hex':
            try:
                data = bytes.fromhex(raw.decode('ascii').strip())
            except (UnicodeDecodeError, ValueError) as e:
                raise ProofDecodeError(f"Invalid hex: {e}") from e
            return decode_proof(data, digest_size=digest_size)
        return proof_from_json(raw.decode('utf-8'))
    except (ProofDecodeError, UnicodeDecodeError) as e:
        click.echo(f"Error decoding proof: {e}", err=True)
        sys.exit(1)


# Command group
@click.group(context_settings=CONTEXT_SETTINGS)
@click.option('--algorithm', '-a', default=DEFAULT_ALGORITHM, show_default=True,
              envvar='MERKLE_ENGINE_ALGORITHM',
              type=click.Choice(available_algorithms(), case_sensitive=False),
              help='Hash algorithm used for the tree')
@click.option('--log-level', default='WARNING', show_default=True,
              envvar='MERKLE_ENGINE_LOG_LEVEL',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Logging level')
@click.option('--verbose', '-v', is_flag=True, help='Shortcut for --log-level DEBUG')
@click.pass_context
def cli(ctx: click.Context, algorithm: str, log_level: str, verbose: bool):
    """Merkle Engine - Merkle trees and inclusion proofs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, log_level.upper()),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    ctx.ensure_object(dict)
    ctx.obj['hasher'] = get_hasher(algorithm)
    logger.debug("Using hasher %r", ctx.obj['hasher'])


@cli.command()
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def root(ctx: click.Context, files: List[str]):
    """Print the root digest of FILES taken as leaves."""
    tree = build_tree(files, ctx.obj['hasher'])
    click.echo(tree.get_root_hex())


@cli.command()
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def levels(ctx: click.Context, files: List[str]):
    """Print every level of the tree built from FILES, leaves first."""
    tree = build_tree(files, ctx.obj['hasher'])
    for depth, level in enumerate(tree.levels()):
        click.echo(f"Level {depth}:")
        for i, digest in enumerate(level):
            click.echo(f"  [{i}] {digest.hex()}")


@cli.command()
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option('--index', '-i', required=True, type=int, help='Index of the leaf to prove')
@click.option('--output', '-o', help='Output file for the proof (default: stdout)')
@click.option('--format', 'fmt', default='binary', show_default=True,
              type=click.Choice(PROOF_FORMATS), help='Proof encoding')
@click.pass_context
def prove(ctx: click.Context, files: List[str], index: int, output: Optional[str], fmt: str):
    """Generate an inclusion proof for one of FILES."""
    tree = build_tree(files, ctx.obj['hasher'])
    try:
        proof = tree.prove(index)
    except MerkleError as e:
        click.echo(f"Error generating proof: {e}", err=True)
        sys.exit(1)

    payload = serialize_proof(proof, fmt)
    if output:
        try:
            Path(output).write_bytes(payload)
        except OSError as e:
            click.echo(f"Error writing proof: {e}", err=True)
            sys.exit(1)
        click.echo(f"Proof saved to {output}", err=True)
    else:
        click.get_binary_stream('stdout').write(payload)


@cli.command()
@click.argument('leaf_file', type=click.Path(exists=True, dir_okay=False))
@click.argument('proof_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--root', 'root_hex', required=True, help='Expected root digest (hex)')
@click.option('--format', 'fmt', default='binary', show_default=True,
              type=click.Choice(PROOF_FORMATS), help='Proof encoding')
@click.pass_context
def verify(ctx: click.Context, leaf_file: str, proof_file: str, root_hex: str, fmt: str):
    """Verify that LEAF_FILE is included under --root using PROOF_FILE."""
    hasher = ctx.obj['hasher']
    try:
        expected_root = bytes.fromhex(root_hex)
    except ValueError:
        click.echo(f"Invalid root digest: {root_hex}", err=True)
        sys.exit(1)

    data = load_leaves([leaf_file])[0]
    proof = load_proof(proof_file, fmt, hasher.digest_size)

    if verify_proof(data, proof, expected_root, hasher):
        click.echo("✅ Proof is valid")
        sys.exit(0)
    else:
        click.echo("❌ Proof is invalid", err=True)
        sys.exit(1)


@cli.command()
@click.argument('proof_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--format', 'fmt', default='binary', show_default=True,
              type=click.Choice(PROOF_FORMATS), help='Proof encoding')
@click.pass_context
def inspect(ctx: click.Context, proof_file: str, fmt: str):
    """Decode PROOF_FILE and print it as JSON."""
    proof = load_proof(proof_file, fmt, ctx.obj['hasher'].digest_size)
    click.echo(proof_to_json(proof))


# Main entry point
if __name__ == '__main__':
    cli()
