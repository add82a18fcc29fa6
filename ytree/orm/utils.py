"""ORM 工具函数

提供命名转换工具。
"""
import re


def to_snake_case(name: str) -> str:
    """驼峰命名转下划线命名（支持连续大写缩写如 E2E、API、URL）
    
    Examples:
        >>> to_snake_case("MenuItem")
        'menu_item'
        >>> to_snake_case("APICategory")
        'api_category'
    """
    # 处理连续大写+数字后跟大写+小写：APIClient → API_Client
    result = re.sub(r'([A-Z\d]+)([A-Z][a-z])', r'\1_\2', name)
    # 处理小写字母后跟大写：menuItem → menu_Item
    result = re.sub(r'([a-z])([A-Z])', r'\1_\2', result)
    return result.lower()
