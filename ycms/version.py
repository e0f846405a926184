"""版本信息"""

__version__ = "0.1.0"
__author__ = "ycms"
__description__ = "导航菜单树排序与级联一致性引擎"
