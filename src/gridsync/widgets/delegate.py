"""Skeleton renderer for placeholder rows."""

from __future__ import annotations

from PySide6.QtCore import QModelIndex, QRectF, QSize, Qt
from PySide6.QtGui import QColor, QPainter, QPalette
from PySide6.QtWidgets import QStyle, QStyledItemDelegate, QStyleOptionViewItem

from .. import config
from ..models.roles import Roles


class LoadingRowDelegate(QStyledItemDelegate):
    """Paint a rounded skeleton bar in place of a placeholder row's text.

    Real rows fall through to the default delegate.  The bar spans the whole
    cell rectangle, which the view widens to the full row through its column
    spans.
    """

    def paint(self, painter: QPainter, option: QStyleOptionViewItem, index: QModelIndex) -> None:  # type: ignore[override]
        if not index.data(Roles.IS_LOADING):
            super().paint(painter, option, index)
            return

        painter.save()
        try:
            painter.setRenderHint(QPainter.Antialiasing, True)
            painter.setPen(Qt.NoPen)
            painter.setBrush(self.skeleton_color(option))
            margin = config.SKELETON_BAR_MARGIN
            rect = QRectF(option.rect).adjusted(margin, margin, -margin, -margin)
            if rect.width() > 0 and rect.height() > 0:
                painter.drawRoundedRect(rect, config.SKELETON_BAR_RADIUS, config.SKELETON_BAR_RADIUS)
        finally:
            painter.restore()

    def sizeHint(self, option: QStyleOptionViewItem, index: QModelIndex) -> QSize:  # type: ignore[override]
        hint = super().sizeHint(option, index)
        if index.data(Roles.IS_LOADING):
            minimum = option.fontMetrics.height() + 2 * config.SKELETON_BAR_MARGIN
            hint.setHeight(max(hint.height(), minimum))
        return hint

    @staticmethod
    def skeleton_color(option: QStyleOptionViewItem) -> QColor:
        color = QColor(option.palette.color(QPalette.Text))
        color.setAlphaF(0.12 if option.state & QStyle.State_Enabled else 0.06)
        return color


__all__ = ["LoadingRowDelegate"]
