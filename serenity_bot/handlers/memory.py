"""记忆管理处理器（清空 / 摘要 / 导出 / 导入）。"""

import logging

from ..router import BotContext

logger = logging.getLogger(__name__)


class MemoryHandler:
    """处理记忆相关请求。"""

    async def clear(self, ctx: BotContext) -> bool:
        """清空短期缓冲，长期记忆保留。"""
        await ctx.services.companion.async_clear_session()
        await ctx.send_json({"type": "cleared"})
        return True

    async def summary(self, ctx: BotContext) -> bool:
        await ctx.send_json({"type": "summary", "summary": ctx.services.companion.summarize()})
        return True

    async def export(self, ctx: BotContext) -> bool:
        await ctx.send_json({"type": "export", "bundle": ctx.services.companion.export_state()})
        return True

    async def import_bundle(self, ctx: BotContext) -> bool:
        """导入备份；bundle 不是对象时回 error。"""
        bundle = ctx.event.get("bundle")
        if not isinstance(bundle, dict):
            await ctx.send_error("import requires a bundle object")
            return True

        imported = await ctx.services.companion.async_import_state(bundle)
        await ctx.send_json({"type": "imported", "count": imported})
        return True
