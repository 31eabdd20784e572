#!/usr/bin/env python3
"""
CraftProbe - Minecraft Server Status Probe
Main entry point with CLI interface
"""

import asyncio
import argparse
import logging
import sys
import os
from pathlib import Path

# Add the current directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

# Now use absolute imports
from core.config import ConfigManager
from core.dispatcher import ProbeDispatcher
from core.exceptions import CraftProbeError
from ui.console import ConsoleUI

EXIT_OFFLINE = 2

def setup_logging(log_file: str, level: str = "INFO", verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)

    # Create logs directory
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    # Configure logging
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(sys.stdout) if verbose else logging.NullHandler()
        ]
    )

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="CraftProbe - Minecraft Server Status Probe",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py play.example.com
  python main.py play.example.com:19133 --type bedrock
  python main.py 10.0.0.5 --timeout 2000 --icon-out favicon.png
        """
    )

    parser.add_argument(
        "address",
        nargs="?",
        help="Server address as host[:port]"
    )

    parser.add_argument(
        "--type",
        choices=['java', 'bedrock'],
        default='java',
        help="Server edition (default: java)"
    )

    parser.add_argument(
        "--timeout", "-t",
        type=int,
        help="Java status timeout in milliseconds"
    )

    # Output options
    parser.add_argument(
        "--icon-out",
        help="Write the server icon to this file"
    )

    parser.add_argument(
        "--raw-motd",
        action="store_true",
        help="Keep § formatting codes in the MOTD and version"
    )

    # Utility commands (don't require an address)
    parser.add_argument(
        "--validate-config",
        action="store_true",
        help="Validate configuration file and exit"
    )

    parser.add_argument(
        "--create-config",
        action="store_true",
        help="Create default configuration file and exit"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="CraftProbe v0.1.0"
    )

    # Configuration
    parser.add_argument(
        "--config", "-c",
        default="config.yaml",
        help="Configuration file path (default: config.yaml)"
    )

    # Logging options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only set the exit code, print nothing"
    )

    return parser

async def run(args: argparse.Namespace) -> int:
    """Probe one address and render the result"""
    config = ConfigManager(args.config)

    if not args.quiet:
        setup_logging(config.logging.file, config.logging.level, args.verbose)

    if args.raw_motd:
        config.ui.strip_formatting = False

    dispatcher = ProbeDispatcher(config.probe)
    record = await dispatcher.query_address(args.address, args.type, args.timeout)

    if not args.quiet:
        ui = ConsoleUI(config.ui)
        ui.render(args.address, record)
        if args.icon_out:
            await ui.save_icon(record, args.icon_out)

    return 0 if record.is_online else EXIT_OFFLINE

def main() -> None:
    """Main application entry point"""
    parser = build_parser()
    args = parser.parse_args()

    try:
        # Handle utility commands first
        if args.create_config:
            config_path = Path(args.config)
            if config_path.exists():
                response = input(f"Config file {config_path} already exists. Overwrite? (y/N): ")
                if response.lower() != 'y':
                    print("Aborted.")
                    return
                config_path.unlink()

            # The config manager writes the default config
            ConfigManager(args.config)
            print(f"✅ Default configuration created: {args.config}")
            return

        if args.validate_config:
            try:
                ConfigManager(args.config)
                print(f"✅ Configuration file {args.config} is valid")
                return
            except CraftProbeError as e:
                print(f"❌ Configuration validation failed: {e}")
                sys.exit(1)

        if not args.address:
            parser.error("an address is required")

        sys.exit(asyncio.run(run(args)))

    except KeyboardInterrupt:
        print("\n🛑 Interrupted")
        sys.exit(130)
    except CraftProbeError as e:
        print(f"❌ CraftProbe error: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
