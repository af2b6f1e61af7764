from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure
from BackEnd.services.aggregator import trend_scale
from FrontEnd.styles.design_tokens import COLORS


class TrendChart(FigureCanvas):
	"""Bar chart of TrendBuckets with labelled values."""

	def __init__(self):
		self.figure = Figure(figsize=(5, 2.2))
		super().__init__(self.figure)

	def show_trend(self, buckets, title, floor, color, fmt="{:.0f}"):
		self.figure.clear()
		self.figure.patch.set_alpha(0.0)
		ax = self.figure.add_subplot(111)
		ax.set_facecolor(COLORS['surface'])
		x = [b.label for b in buckets]
		y = [b.value for b in buckets]
		bars = ax.bar(x, y, color=color, edgecolor=COLORS['border'], linewidth=1.2, alpha=0.9)
		top = trend_scale(buckets, floor)
		for bar, value in zip(bars, y):
			if value > 0:
				ax.text(bar.get_x() + bar.get_width()/2, bar.get_height() + top * 0.02,
					fmt.format(value), ha='center', va='bottom', fontsize=8, color=COLORS['text'])
		ax.set_ylim(0, top * 1.15)
		ax.set_title(title, fontsize=11, fontweight='bold', color=COLORS['text'])
		ax.grid(True, axis='y', alpha=0.25, linestyle='--', linewidth=0.8)
		ax.set_axisbelow(True)
		ax.tick_params(axis='both', colors=COLORS['text_muted'], labelsize=9)
		for spine in ['top', 'right']:
			ax.spines[spine].set_visible(False)
		self.figure.tight_layout()
		self.draw()


class LastDaysStrip(FigureCanvas):
	"""Row of dots marking days with at least one log."""

	def __init__(self):
		self.figure = Figure(figsize=(5, 0.8))
		super().__init__(self.figure)

	def show_statuses(self, statuses, title):
		self.figure.clear()
		self.figure.patch.set_alpha(0.0)
		ax = self.figure.add_subplot(111)
		ax.axis('off')
		for i, (day, status) in enumerate(statuses):
			ax.scatter([i], [0.6], s=260, color=COLORS[status], edgecolors=COLORS['border'])
			ax.text(i, 0.0, day.strftime("%a")[:1].upper(), ha='center', fontsize=8, color=COLORS['text_muted'])
		ax.set_xlim(-0.6, max(len(statuses), 1) - 0.4)
		ax.set_ylim(-0.3, 1.1)
		ax.set_title(title, fontsize=9, color=COLORS['text_muted'], loc='left')
		self.draw()
