"""内置默认配置（boon init 写出的模板）"""

CONFIG_FILE_NAME = "Boon.yaml"

DEFAULT_CONFIG = """\
project:
  title: "My Game"
  package_name: "my_game"
  uti: "com.example.mygame"
  authors: ""
  description: ""
  email: ""
  url: ""
  version: "0.1.0"

build:
  # 发布目录，相对于项目目录
  output_directory: "release"
  # 为 true 时只使用本文件的 ignore_list，不合并默认列表
  exclude_default_ignore_list: false
  # 排除规则是正则表达式，针对以 / 分隔的相对路径做搜索匹配
  ignore_list:
    - "^\\\\.git/"
    - "^\\\\.gitignore$"
    - "^\\\\.gitattributes$"
    - "^\\\\.hg/"
    - "^\\\\.svn/"
    - "^\\\\.vscode/"
    - "^\\\\.idea/"
    - "(^|/)\\\\.DS_Store$"
    - "(^|/)Thumbs\\\\.db$"
    - "^Boon\\\\.yaml$"
"""
