"""Serenity 陪伴核心（前端 -> WebSocket Server）

模块化结构：
- settings: 配置加载
- emotion/*: 情绪识别与形象呈现
- memory/*: 短期缓冲 + 长期记忆
- companion: 对外边界（组合 emotion 与 memory）
- ai/*: 推理服务调用
- handler: 请求处理主逻辑
- server: WebSocket server 启动
"""
