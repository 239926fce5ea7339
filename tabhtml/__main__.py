import argparse
import logging
import time

from .config import load_config
from .watcher import run_watcher, trigger_recompile


def main(argv=None):
    parser = argparse.ArgumentParser(
                        prog='tabhtml',
                        description='Compile indentation-based tabhtml templates to HTML',
                        epilog='Without --once, keeps watching the sources and recompiles on change.')
    parser.add_argument('config', help='YAML file listing src/dst pairs')
    parser.add_argument('--once', action='store_true', help='compile every pair once and exit')
    parser.add_argument('-v', '--verbose', action='store_true', help='enable debug logging')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(message)s',
                        datefmt='%Y-%m-%d %H:%M:%S')

    if args.once:
        cfg = load_config(args.config)
        trigger_recompile(cfg.write_pairs, cfg.make_compiler(), cfg.encoding)
        return 0

    while True:
        try:
            cfg = load_config(args.config)
            trigger_recompile(cfg.write_pairs, cfg.make_compiler(), cfg.encoding)
            run_watcher(cfg)
            return 0
        except (OSError, ValueError) as e:
            print(f"Error: {e}")
            print("Please check your configuration and try again, attempting to reload in 3 seconds...")
            time.sleep(3)


if __name__ == '__main__':
    raise SystemExit(main())
