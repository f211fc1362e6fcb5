"""catrust CLI — inject a custom CA bundle into rendered agent DaemonSet manifests."""

import argparse
import sys

import yaml

from catrust.errors import ApplyTimeError, ConfigurationError
from catrust.pacts.types import ResolvedSpec, WholeSecretMode
from catrust.core.manifests import emit_warnings, index_secrets, parse_manifests, write_manifests
from catrust.core.provision import provision
from catrust.core.resolve import resolve
from catrust.core.secrets import KubectlSecretStore, ManifestSecretStore
from catrust.core.values import config_from_values, merge_values


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catrust",
        description="Resolve caCerts values and inject the CA bundle into DaemonSet manifests",
    )
    parser.add_argument(
        "-f", "--values", action="append", default=[], metavar="FILE",
        help="Values file (repeatable; later files override earlier ones)",
    )
    parser.add_argument(
        "--set", action="append", default=[], dest="sets", metavar="EXPR",
        help="Override a value, e.g. caCerts.enabled=true (repeatable)",
    )
    parser.add_argument(
        "--from-dir",
        help="Directory of rendered manifests to patch",
    )
    parser.add_argument(
        "--output", default="catrust-rendered.yaml",
        help="Where to write the patched manifests (default: catrust-rendered.yaml)",
    )
    parser.add_argument(
        "--workload", action="append", default=[], dest="workloads", metavar="NAME",
        help="Only patch the DaemonSet with this name (repeatable; default: all)",
    )
    parser.add_argument(
        "--container",
        help="Container receiving the mounts and env (default: first container)",
    )
    parser.add_argument(
        "-n", "--namespace",
        help="Look secrets up in this namespace with kubectl instead of rendered manifests",
    )
    parser.add_argument(
        "--materialize-root", metavar="DIR",
        help="Also write each mounted file under DIR, mirroring the container filesystem",
    )
    parser.add_argument(
        "--print-spec", action="store_true",
        help="Print the resolved mounts and env vars as YAML on stdout",
    )
    return parser


def _print_spec(spec: ResolvedSpec) -> None:
    yaml.safe_dump(spec.to_dict(), sys.stdout, default_flow_style=False, sort_keys=False)


def run(args: argparse.Namespace) -> int:
    """Run one provisioning cycle. Returns the process exit code."""
    config = config_from_values(merge_values(args.values, args.sets))
    manifests = parse_manifests(args.from_dir) if args.from_dir else {}
    if manifests:
        kinds = {k: len(v) for k, v in manifests.items()}
        print(f"Parsed manifests: {kinds}", file=sys.stderr)
    if not config.enabled:
        print("caCerts.enabled is false — nothing to inject", file=sys.stderr)

    if not args.from_dir and not args.namespace:
        # No secret source: resolve from values alone (whole-secret mode sees no keys)
        spec = resolve(config)
        warnings: list[str] = []
        if config.enabled and isinstance(config.mode, WholeSecretMode):
            warnings.append("whole-secret mode without --from-dir or --namespace — "
                            "secret keys unknown, no mounts resolved")
        _print_spec(spec)
        emit_warnings(warnings)
        return 0

    if args.namespace:
        store = KubectlSecretStore(args.namespace)
    else:
        store = ManifestSecretStore(index_secrets(manifests))
    result = provision(config, manifests, store,
                       workloads=args.workloads or None, container=args.container)

    if args.print_spec:
        _print_spec(result.spec)
    if args.materialize_root:
        for directive in result.spec.mounts:
            path = store.materialize(config.secret_name, directive, args.materialize_root)
            print(f"Wrote {path}", file=sys.stderr)

    emit_warnings(result.warnings)
    if args.from_dir:
        write_manifests(result.manifests, args.output)
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.from_dir and not args.print_spec:
        parser.error("one of --from-dir or --print-spec is required")
    if args.materialize_root and not (args.from_dir or args.namespace):
        parser.error("--materialize-root needs a secret source (--from-dir or --namespace)")
    try:
        return run(args)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except ApplyTimeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print("The previous configuration remains in effect; fix the secret and re-run.",
              file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
