from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure
from BackEnd.services.timeline import ROLLING
from FrontEnd.styles.design_tokens import COLORS


class TimelineChart(FigureCanvas):
	"""Horizontal 0-100% strip with one bar per event, drawn from a TimelineMapper layout."""

	def __init__(self, t):
		self.figure = Figure(figsize=(5, 1.1))
		super().__init__(self.figure)
		self.t = t

	def show_events(self, mapper, events):
		self.figure.clear()
		self.figure.patch.set_alpha(0.0)
		ax = self.figure.add_subplot(111)
		ax.set_facecolor(COLORS['surface'])
		ax.set_xlim(0, 100)
		ax.set_ylim(0, 1)
		ax.set_yticks([])
		ticks = mapper.ticks()
		for pos, _ in ticks:
			ax.axvline(pos, color=COLORS["border"], linewidth=0.8, zorder=0)
		positions = [pos for pos, _ in ticks]
		if mapper.mode == ROLLING:
			labels = [self.t("now") if h == 0 else f"-{h}h" for _, h in ticks]
		else:
			labels = [f"{h:02}:00" for _, h in ticks]
		ax.set_xticks(positions)
		ax.set_xticklabels(labels, fontsize=8, color=COLORS['text_muted'])
		for bar in mapper.layout(events):
			ax.broken_barh(
				[(bar.left, bar.width)], (0.2, 0.6),
				facecolors=bar.color or COLORS['bottle'],
				edgecolor='black', linewidth=0.4, alpha=0.75 if bar.live else 1.0,
			)
			if bar.label and bar.width > 5:
				ax.text(bar.left + bar.width / 2, 0.5, bar.label, ha='center', va='center',
					fontsize=7, fontweight='bold', color='white')
		for spine in ax.spines.values():
			spine.set_visible(False)
		self.figure.tight_layout()
		self.draw()
