from __future__ import annotations

import argparse
import dataclasses
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .client.seventv import SevenTvGqlClient, SevenTvGqlError
from .core.config import CONFIG_PATH, TOKEN_ENV, ConfigManager, ShufflerConfig, read_token
from .core.errors import ExecutionError, PlanError
from .core.executor import TqdmProgress
from .core.logger import configure_logging, get_logger
from .core.shuffler import shuffle_set

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="emote-shuffler",
        description="随机打乱 7TV 表情集中表情的名称",
    )
    p.add_argument("username", nargs="?", help="Twitch 用户名, 使用其当前启用的表情集")
    p.add_argument("--set-id", help="直接指定表情集 ID, 跳过用户查询")
    p.add_argument("--rate", type=float, default=None, help="每分钟最多改名次数")
    p.add_argument("--dry-run", action="store_true", help="只打印改名计划, 不实际改名")
    p.add_argument("--no-progress", action="store_true", help="不显示进度条")
    p.add_argument("--config", type=Path, default=None, help="配置文件路径")
    p.add_argument("--write-config", action="store_true", help="把当前生效的配置写入配置文件")
    p.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")
    return p


def _effective_config(args: argparse.Namespace) -> tuple[ConfigManager, ShufflerConfig]:
    manager = ConfigManager(args.config or CONFIG_PATH)
    config = manager.get()
    if args.rate is not None:
        if args.rate <= 0:
            raise ValueError(f"--rate 必须为正数: {args.rate}")
        config = dataclasses.replace(config, rate_per_minute=args.rate)
    if args.verbose:
        config = dataclasses.replace(config, log_level="DEBUG")
    return manager, config


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.username and not args.set_id:
        parser.error("需要提供用户名或 --set-id")

    load_dotenv()
    try:
        manager, config = _effective_config(args)
        configure_logging(config.log_dir, config.log_level)
        if args.write_config:
            manager.save(config)
            logger.info("配置已写入 %s", manager.path)
    except (ValueError, OSError) as exc:
        logger.error("配置无效: %s", exc)
        return 1

    token = read_token()
    if token is None and not args.dry_run:
        logger.error("未设置环境变量 %s, 无法改名", TOKEN_ENV)
        return 1

    with SevenTvGqlClient(token, config.endpoint, config.request_timeout) as client:
        try:
            if args.set_id:
                emote_set = client.get_emote_set(args.set_id)
            else:
                emote_set = client.get_user_emote_set(args.username)
            result = shuffle_set(
                client,
                emote_set,
                rate=config.rate_per_minute,
                progress=TqdmProgress(disable=args.no_progress),
                preview=args.dry_run,
                temp_name_length=config.temp_name_length,
            )
        except ExecutionError as exc:
            logger.error("%s (原因: %s), 已完成 %s/%s 步", exc, exc.__cause__, exc.completed, exc.total)
            return 1
        except (SevenTvGqlError, PlanError) as exc:
            logger.error("%s", exc)
            return 1
        except KeyboardInterrupt:
            logger.warning("已中断, 表情集可能只被部分打乱")
            return 130

    if result.preview:
        logger.info("预览完成: 计划 %s 步", len(result.planned))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
