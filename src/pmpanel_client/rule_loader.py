"""
本地审计规则加载

每行一条正则表达式。文件不可读时降级为空规则列表，规则本身无效时中止启动。
"""

import re
import logging
from typing import List, Optional

from .errors import RuleFileError
from .models import DetectRule, LOCAL_RULE_ID

logger = logging.getLogger(__name__)


def read_local_rule_list(path: Optional[str]) -> List[DetectRule]:
    """
    读取本地审计规则文件

    Args:
        path: 规则文件路径，为空表示不启用审计

    Returns:
        List[DetectRule]: 按文件顺序排列的规则

    Raises:
        RuleFileError: 规则无法编译，或打开后读取失败
    """
    rules: List[DetectRule] = []
    if not path:
        return rules

    try:
        f = open(path, 'r', encoding='utf-8')
    except OSError as e:
        logger.error(f"Error when opening file: {e}")
        return rules

    line_number = 0
    with f:
        try:
            for line_number, line in enumerate(f, start=1):
                text = line.rstrip('\r\n')
                if not text:
                    continue
                try:
                    pattern = re.compile(text)
                except re.error as e:
                    logger.critical(f"Invalid rule at {path}:{line_number}: {e}")
                    raise RuleFileError(path, line_number, e)
                rules.append(DetectRule(id=LOCAL_RULE_ID, pattern=pattern))
        except (OSError, UnicodeDecodeError) as e:
            logger.critical(f"Error while reading file: {e}")
            raise RuleFileError(path, line_number + 1, e)

    logger.info(f"Loaded {len(rules)} local audit rules from {path}")
    return rules
