from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from duet.adapters.mock_adapter import MockTransport
from duet.config import Config, reasoner_model_from_env
from duet.console import render
from duet.errors import AgentError, ConfigError, DeepSeekError
from duet.orchestrator import Orchestrator
from duet.tasks import demo_task_spec, load_task_spec

logger = logging.getLogger("duet")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Producer/Auditor pipeline over DeepSeek")
    parser.add_argument("--task", type=Path, help="TaskSpec JSON/YAML file; the demo task is used if omitted")
    parser.add_argument("--out-dir", type=Path, default=Path("out"), help="Directory for artifacts")
    parser.add_argument(
        "--console-producer",
        action="store_true",
        help="Collect a task interactively and run only the ProducerAgent",
    )
    parser.add_argument("--chat", action="store_true", help="Interactive single-turn JSON chat")
    parser.add_argument("--mode", choices=["live", "mock"], default="live")
    parser.add_argument(
        "--no-render", dest="render", action="store_false", help="Do not print artifacts to the console"
    )
    return parser


def log_level_from_env() -> int:
    name = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        return logging.INFO
    return level


def configure_logging() -> None:
    logging.basicConfig(
        level=log_level_from_env(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_config(mode: str) -> Config:
    try:
        config = Config.from_env()
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc
    if mode == "mock" and not config.api_key:
        config = replace(config, api_key="mock", use_sdk=False)
    return config


def build_orchestrator(mode: str, render_artifacts: bool = True) -> Orchestrator:
    config = _load_config(mode)
    reasoner_model = reasoner_model_from_env()
    if mode == "mock":
        return Orchestrator(
            config,
            reasoner_model=reasoner_model,
            chat_transport=MockTransport(model=config.model, temperature=config.temperature),
            reasoner_transport=MockTransport(model=reasoner_model, temperature=config.temperature),
            render_artifacts=render_artifacts,
        )
    return Orchestrator(config, reasoner_model=reasoner_model, render_artifacts=render_artifacts)


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        orchestrator = build_orchestrator(args.mode, args.render)
    except DeepSeekError as exc:
        render.display_error(exc)
        return 1

    try:
        if args.chat:
            orchestrator.run_chat()
            return 0
        if args.console_producer:
            solution = orchestrator.run_console_producer(args.out_dir)
            return 0 if solution is not None else 1

        task = load_task_spec(args.task) if args.task else demo_task_spec()
        orchestrator.run_pipeline(task, args.out_dir)
        return 0
    except (DeepSeekError, AgentError, OSError) as exc:
        logger.error("Run failed: %s", exc)
        render.display_error(exc)
        return 1
    except KeyboardInterrupt:
        render.display_goodbye()
        return 130
    finally:
        orchestrator.close()


def main() -> None:
    configure_logging()
    sys.exit(run())


if __name__ == "__main__":
    main()
