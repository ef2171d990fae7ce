"""Command line interface for cargo-wix."""
from __future__ import annotations

from argparse import ArgumentParser, BooleanOptionalAction, Namespace
from pathlib import Path
from typing import Callable, Dict, Iterable, List
import sys

from wixcore.console import Console

from . import __version__
from .clean import CleanBuilder
from .create import CreateBuilder
from .errors import GenericError, WixError, describe, exit_code
from .initialize import InitializeBuilder
from .printer.license import LicenseBuilder
from .printer.wxs import WxsBuilder
from .purge import PurgeBuilder
from .sign import SignBuilder
from .templates import Template


DEFAULT_COMMAND = "create"
COMMANDS = ("create", "init", "print", "sign", "clean", "purge")


def _normalize_argv(argv: Iterable[str]) -> List[str]:
    """Drop the ``wix`` token cargo passes and default to ``create``."""

    args = list(argv)
    if args and args[0] == "wix":
        args = args[1:]
    if not args or args[0] not in (*COMMANDS, "-h", "--help", "--version"):
        args = [DEFAULT_COMMAND, *args]
    return args


def _common_parser() -> ArgumentParser:
    common = ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="count", default=0, help="Increase output verbosity (repeatable)")
    common.add_argument("-q", "--quiet", action="store_true", help="Suppress all log output")
    common.add_argument("--config", type=Path, metavar="PATH", help="Settings overlay (TOML, JSON or YAML) merged over [package.metadata.wix]")
    common.add_argument("-p", "--package", help="Package to use in a workspace")
    return common


def _add_input(parser: ArgumentParser) -> None:
    parser.add_argument("input", nargs="?", type=Path, metavar="INPUT", help="Path to the package's manifest (Cargo.toml) or its folder")


def _add_wxs_options(parser: ArgumentParser) -> None:
    parser.add_argument("-b", "--binary", dest="binaries", action="append", type=Path, default=[], metavar="PATH", help="Executable to install; repeat for several (default: all binary targets)")
    parser.add_argument("--banner", type=Path, help="Top banner image (493 x 58 bmp)")
    parser.add_argument("--dialog", type=Path, help="Welcome and completion dialog image (493 x 312 bmp)")
    parser.add_argument("-d", "--description", help="Override the package description")
    parser.add_argument("-e", "--eula", type=Path, help="RTF file shown as the end-user license agreement")
    parser.add_argument("-u", "--help-url", help="Support URL shown in Add/Remove Programs")
    parser.add_argument("-l", "--license", type=Path, help="License file installed next to the binaries")
    parser.add_argument("-m", "--manufacturer", help="Override the manufacturer (default: first author)")
    parser.add_argument("--path-guid", help="Pinned GUID for the PATH environment component")
    parser.add_argument("--upgrade-guid", help="Pinned upgrade code GUID")
    parser.add_argument("--product-icon", type=Path, help="Icon shown in Add/Remove Programs")
    parser.add_argument("--product-name", help="Override the product name (default: package name)")


def _add_copyright_options(parser: ArgumentParser) -> None:
    parser.add_argument("-y", "--year", dest="copyright_year", help="Copyright year (default: current year)")
    parser.add_argument("-c", "--holder", dest="copyright_holder", help="Copyright holder (default: manufacturer)")


def _parse_arguments(argv: Iterable[str]) -> Namespace:
    parser = ArgumentParser(prog="cargo-wix", description="Build Windows installers for Rust projects with the WiX Toolset")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)
    common = _common_parser()

    create_parser = subparsers.add_parser("create", parents=[common], help="Build the project and create an installer (default)")
    _add_input(create_parser)
    create_parser.add_argument("--bin-path", type=Path, metavar="PATH", help="Folder containing candle and light")
    create_parser.add_argument("--capture-output", action=BooleanOptionalAction, default=True, help="Capture the output of external tools")
    create_parser.add_argument("-C", "--culture", help="Culture for the installer UI (default: en-US)")
    create_parser.add_argument("--dbg-build", dest="debug_build", action="store_const", const=True, default=None, help="Package the debug build")
    create_parser.add_argument("--profile", help="Cargo profile to build and package")
    create_parser.add_argument("--target", help="Target triple to build and package")
    create_parser.add_argument("-I", "--include", dest="includes", action="append", type=Path, default=[], metavar="WXS", help="Additional WiX Source file; repeat for several")
    create_parser.add_argument("-i", "--install", action="store_true", help="Run the installer after creating it")
    create_parser.add_argument("-L", "--locale", type=Path, help="WiX localization (wxl) file")
    create_parser.add_argument("-n", "--name", help="Override the installer name")
    create_parser.add_argument("--no-build", action="store_const", const=True, default=None, help="Skip building the project")
    create_parser.add_argument("-o", "--output", help="Installer file or folder (a trailing separator marks a folder)")
    create_parser.add_argument("--install-version", dest="version", help="Override the installer version")
    create_parser.add_argument("-s", "--sign", action="store_true", help="Sign the installer after creating it")
    create_parser.add_argument("-t", "--timestamp", help="Timestamp server alias or URL used with --sign")

    init_parser = subparsers.add_parser("init", parents=[common], help="Create the wix folder with a main.wxs and license")
    _add_input(init_parser)
    _add_wxs_options(init_parser)
    _add_copyright_options(init_parser)
    init_parser.add_argument("--force", action="store_true", help="Overwrite existing files")
    init_parser.add_argument("-o", "--output", type=Path, help="Destination folder (default: <package>/wix)")

    print_parser = subparsers.add_parser("print", parents=[common], help="Print a template to stdout or a file")
    print_parser.add_argument("template", choices=Template.possible_values(), metavar="TEMPLATE", help=f"One of: {', '.join(Template.possible_values())}")
    _add_input(print_parser)
    _add_wxs_options(print_parser)
    _add_copyright_options(print_parser)
    print_parser.add_argument("-o", "--output", type=Path, help="Write to this file instead of stdout")

    sign_parser = subparsers.add_parser("sign", parents=[common], help="Sign an installer with signtool")
    _add_input(sign_parser)
    sign_parser.add_argument("--bin-path", type=Path, metavar="PATH", help="signtool executable or its folder")
    sign_parser.add_argument("--capture-output", action=BooleanOptionalAction, default=True, help="Capture the output of signtool")
    sign_parser.add_argument("-d", "--description", help="Override the signed content description")
    sign_parser.add_argument("-u", "--homepage", help="Override the signed content URL")
    sign_parser.add_argument("--installer", type=Path, help="Installer to sign, relative to the package (default: newest in target/wix)")
    sign_parser.add_argument("--product-name", help="Override the signed product name")
    sign_parser.add_argument("-t", "--timestamp", help="Timestamp server alias (comodo, verisign) or URL")

    clean_parser = subparsers.add_parser("clean", parents=[common], help="Remove target/wix")
    _add_input(clean_parser)

    purge_parser = subparsers.add_parser("purge", parents=[common], help="Remove target/wix and the wix folder")
    _add_input(purge_parser)

    return parser.parse_args(list(argv))


def _wxs_options(args: Namespace) -> Dict[str, object]:
    return {
        "banner": args.banner,
        "binaries": tuple(args.binaries),
        "config": args.config,
        "description": args.description,
        "dialog": args.dialog,
        "eula": args.eula,
        "help_url": args.help_url,
        "input": args.input,
        "license": args.license,
        "manufacturer": args.manufacturer,
        "package": args.package,
        "path_guid": args.path_guid,
        "product_icon": args.product_icon,
        "product_name": args.product_name,
        "upgrade_guid": args.upgrade_guid,
    }


def _handle_create(args: Namespace, console: Console) -> int:
    builder = CreateBuilder().configure(
        bin_path=args.bin_path,
        capture_output=args.capture_output,
        config=args.config,
        culture=args.culture,
        debug_build=args.debug_build,
        includes=tuple(args.includes),
        input=args.input,
        install=args.install,
        locale=args.locale,
        name=args.name,
        no_build=args.no_build,
        output=args.output,
        package=args.package,
        profile=args.profile,
        target=args.target,
        version=args.version,
    )
    result = builder.build(console=console).run()
    console.info(f"Created {result.installer}")

    if args.sign:
        signer = SignBuilder(
            capture_output=args.capture_output,
            config=args.config,
            input=args.input,
            installer=result.installer,
            package=args.package,
            timestamp=args.timestamp,
        )
        signer.build(console=console).run()
    return 0


def _handle_init(args: Namespace, console: Console) -> int:
    builder = InitializeBuilder(
        copyright_holder=args.copyright_holder,
        copyright_year=args.copyright_year,
        force=args.force,
        output=args.output,
        **_wxs_options(args),
    )
    result = builder.build(console=console).run()
    if result.already_exists:
        print("The project is already initialized. Use --force to overwrite the existing files.")
    return 0


def _handle_print(args: Namespace, console: Console) -> int:
    template = Template.from_str(args.template)
    if template is Template.WXS:
        if args.copyright_year is not None or args.copyright_holder is not None:
            raise GenericError("The '--year' and '--holder' options only apply to license templates")
        execution = WxsBuilder(output=args.output, **_wxs_options(args)).build(console=console)
    else:
        execution = LicenseBuilder(
            template=template,
            copyright_holder=args.copyright_holder,
            copyright_year=args.copyright_year,
            config=args.config,
            input=args.input,
            output=args.output,
            package=args.package,
        ).build(console=console)

    text = execution.run()
    if args.output is None:
        sys.stdout.write(text)
    return 0


def _handle_sign(args: Namespace, console: Console) -> int:
    builder = SignBuilder(
        bin_path=args.bin_path,
        capture_output=args.capture_output,
        config=args.config,
        description=args.description,
        homepage=args.homepage,
        input=args.input,
        installer=args.installer,
        package=args.package,
        product_name=args.product_name,
        timestamp=args.timestamp,
    )
    builder.build(console=console).run()
    return 0


def _handle_clean(args: Namespace, console: Console) -> int:
    CleanBuilder(config=args.config, input=args.input, package=args.package).build(console=console).run()
    return 0


def _handle_purge(args: Namespace, console: Console) -> int:
    PurgeBuilder(config=args.config, input=args.input, package=args.package).build(console=console).run()
    return 0


_HANDLERS: Dict[str, Callable[[Namespace, Console], int]] = {
    "create": _handle_create,
    "init": _handle_init,
    "print": _handle_print,
    "sign": _handle_sign,
    "clean": _handle_clean,
    "purge": _handle_purge,
}


def main(argv: Iterable[str] | None = None) -> int:
    args = _parse_arguments(_normalize_argv(sys.argv[1:] if argv is None else argv))
    console = Console.from_verbosity(args.verbose, quiet=args.quiet)

    try:
        return _HANDLERS[args.command](args, console)
    except WixError as exc:
        for line in describe(exc):
            print(line, file=sys.stderr)
        return exit_code(exc)


__all__ = ["main"]
