import logging
from pathlib import Path
from typing import Dict, Iterable

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .compiler import TabhtmlCompiler
from .config import Config

logger = logging.getLogger(__name__)


def compile_file(src: Path, dst: Path, compiler: TabhtmlCompiler, encoding: str = 'ascii'):
    with open(src, "r", encoding=encoding) as f:
        source = f.read()
    html = compiler.render(source)
    with open(dst, "w", encoding=encoding) as f:
        f.write(html)
    logger.info("Compiled %s -> %s", src, dst)


def trigger_recompile(write_pairs: Dict[Path, Path], compiler: TabhtmlCompiler, encoding: str = 'ascii'):
    for (src, dst) in write_pairs.items():
        compile_file(src, dst, compiler, encoding)


class ChangeHandler(FileSystemEventHandler):
    def __init__(self, files_to_watch: Iterable[Path], config: Config):
        self.files_to_watch = {x.resolve() for x in files_to_watch}  # absolute paths (sources + extra watches)
        self.config = config
        self.compiler = config.make_compiler()

    def on_modified(self, event):
        if event.is_directory:
            return

        src_path_abs = Path(event.src_path).resolve()
        if src_path_abs not in self.files_to_watch:
            return
        logger.info("Detected modification in: %s", src_path_abs)
        try:
            trigger_recompile(self.config.write_pairs, self.compiler, self.config.encoding)
        except (OSError, ValueError) as e:
            # Keep watching; the next save may fix it
            logger.error("Recompile failed: %s", e)


def run_watcher(config: Config):
    """Sets up and runs the watchdog observer until interrupted."""
    files_to_watch = set(config.write_pairs.keys()) | config.watch_paths
    dirs_to_watch = {p.parent for p in files_to_watch if p.parent.is_dir()}
    if not dirs_to_watch:
        logger.error("No existing directories to watch")
        return

    logging.basicConfig(level=logging.INFO,
                        format='%(asctime)s - %(message)s',
                        datefmt='%Y-%m-%d %H:%M:%S')

    observer = Observer()
    event_handler = ChangeHandler(files_to_watch, config)
    for dir_path in dirs_to_watch:
        observer.schedule(event_handler, str(dir_path), recursive=False)
    observer.start()
    logger.info("Watching %d file(s) in %d director%s, Ctrl+C to stop",
                len(files_to_watch), len(dirs_to_watch), 'y' if len(dirs_to_watch) == 1 else 'ies')

    try:
        while observer.is_alive():
            observer.join(timeout=1)
    except KeyboardInterrupt:
        logger.info("Stopping watcher")
    finally:
        observer.stop()
        observer.join()
