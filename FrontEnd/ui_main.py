import logging
import datetime
from pathlib import Path
from PySide6.QtWidgets import (
	QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QListWidget,
	QStackedWidget, QListWidgetItem, QComboBox, QSpinBox, QDateTimeEdit, QButtonGroup
)
from PySide6.QtCore import Qt, QDateTime
from BackEnd.core.clock import now_ms, from_ms, fmt_hms, fmt_mmss, fmt_since
from BackEnd.core.errors import TrackerError
from BackEnd.core.models import ToolKind, FEEDING_TYPES
from BackEnd.core.settings import load_settings, active_subject
from BackEnd.core.ticker import Ticker
from BackEnd.services.log_store import LogStore
from BackEnd.services.breastfeeding_service import BreastfeedingService
from BackEnd.services.feeding_service import FeedingService
from BackEnd.services.sleep_service import SleepService
from BackEnd.services import aggregator
from BackEnd.services.timeline import TimelineMapper, events_from_logs
from FrontEnd.components.footer_summary import FooterSummary
from FrontEnd.components.timeline_chart import TimelineChart
from FrontEnd.components.trend_chart import TrendChart, LastDaysStrip
from FrontEnd.i18n import make_translator
from FrontEnd.styles.design_tokens import COLORS

logger = logging.getLogger(__name__)

QSS_PATH = Path(__file__).parent / "styles" / "nanapp.qss"


class MainWindow(QMainWindow):
	def __init__(self, settings=None, db_file=None):
		super().__init__()
		self.settings = settings if settings is not None else load_settings()
		self.t = make_translator(self.settings["language"])
		self.setWindowTitle("NanApp")
		self.resize(1000, 700)

		with open(QSS_PATH, 'r', encoding='utf-8') as f:
			self.setStyleSheet(f.read())

		subject = active_subject(self.settings)
		self.stores = {
			kind: LogStore(kind, subject=subject, db_file=db_file)
			for kind in (ToolKind.BREASTFEEDING, ToolKind.BOTTLE, ToolKind.SLEEP)
		}
		self.bf_service = BreastfeedingService(self.stores[ToolKind.BREASTFEEDING], pulse=self._pulse)
		self.feeding_service = FeedingService(self.stores[ToolKind.BOTTLE], pulse=self._pulse)
		self.sleep_service = SleepService(self.stores[ToolKind.SLEEP], pulse=self._pulse)

		# --- Sidebar ---
		self.sidebar = QListWidget()
		self.sidebar.setFixedWidth(200)
		self.sidebar.setSpacing(12)
		for key in ('breastfeeding', 'bottle', 'sleep', 'trends'):
			self.sidebar.addItem(QListWidgetItem(self.t(key)))
		self.sidebar.setCurrentRow(0)

		self.stack = QStackedWidget()
		self.stack.addWidget(self._build_breastfeeding_tab())
		self.stack.addWidget(self._build_bottle_tab())
		self.stack.addWidget(self._build_sleep_tab())
		self.stack.addWidget(self._build_trends_tab())
		self.sidebar.currentRowChanged.connect(self._on_page_changed)

		self.footer = FooterSummary(['breastfeeding', 'bottle', 'sleep'])

		content_widget = QWidget()
		content_layout = QVBoxLayout()
		content_layout.setContentsMargins(0, 0, 0, 0)
		content_layout.addWidget(self.stack)
		content_layout.addWidget(self.footer)
		content_widget.setLayout(content_layout)

		main_layout = QHBoxLayout()
		main_layout.setContentsMargins(0, 0, 0, 0)
		main_layout.setSpacing(0)
		main_layout.addWidget(self.sidebar)
		main_layout.addWidget(content_widget)
		container = QWidget()
		container.setLayout(main_layout)
		self.setCentralWidget(container)

		# "time since last" texts only need a slow refresh; app.py scopes it to the event loop
		self.summary_ticker = Ticker(60000, self._refresh_summary)
		self._refresh_all()

	def closeEvent(self, event):
		# Tickers must not outlive the window. A running breastfeeding session
		# is committed so it is not lost; an open sleep stays open in the store.
		self.summary_ticker.stop()
		if self.bf_service.timer.running:
			self._guard(self.bf_service.stop)
		self.bf_service.teardown()
		self.sleep_service.teardown()
		super().closeEvent(event)

	def _pulse(self):
		self.statusBar().showMessage(self.t('saved'), 1500)

	def _guard(self, fn, *args):
		"""Run a UI action; tracker errors are shown, never raised into Qt."""
		try:
			return fn(*args)
		except TrackerError as e:
			logger.warning("Action rejected: %s", e)
			self.statusBar().showMessage(str(e), 4000)
			return None

	def _on_page_changed(self, index):
		self.stack.setCurrentIndex(index)
		if index == 3:
			self._refresh_trends()

	def _build_manual_row(self, on_save):
		row = QHBoxLayout()
		start_edit = QDateTimeEdit(QDateTime.currentDateTime().addSecs(-1800))
		end_edit = QDateTimeEdit(QDateTime.currentDateTime())
		for edit in (start_edit, end_edit):
			edit.setDisplayFormat("dd/MM HH:mm")
			edit.setCalendarPopup(True)
		save_btn = QPushButton(self.t('save'))
		save_btn.clicked.connect(lambda: on_save(start_edit.dateTime().toPython(), end_edit.dateTime().toPython()))
		row.addWidget(QLabel(self.t('manual_entry')))
		row.addWidget(QLabel(self.t('start_time')))
		row.addWidget(start_edit)
		row.addWidget(QLabel(self.t('end_time')))
		row.addWidget(end_edit)
		row.addWidget(save_btn)
		return row

	# --- Breastfeeding ---

	def _build_breastfeeding_tab(self):
		w = QWidget()
		layout = QVBoxLayout()
		layout.setContentsMargins(32, 24, 32, 16)

		side_row = QHBoxLayout()
		side_row.addStretch()
		self.side_group = QButtonGroup(w)
		self.side_buttons = {}
		for side in ('L', 'R'):
			btn = QPushButton(side)
			btn.setCheckable(True)
			btn.setFixedSize(48, 48)
			btn.setObjectName("SideBtn")
			self.side_group.addButton(btn)
			self.side_buttons[side] = btn
			side_row.addWidget(btn)
		side_row.addStretch()
		layout.addLayout(side_row)
		self.next_side_label = QLabel("")
		self.next_side_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
		layout.addWidget(self.next_side_label)

		self.bf_timer_label = QLabel("0:00")
		self.bf_timer_label.setObjectName("TimerLabel")
		self.bf_timer_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
		layout.addWidget(self.bf_timer_label)

		btn_layout = QHBoxLayout()
		btn_layout.setSpacing(16)
		self.bf_start_pause_btn = QPushButton(self.t('start'))
		self.bf_stop_btn = QPushButton(self.t('stop'))
		self.bf_quick_btn = QPushButton(self.t('quick_log'))
		for btn in (self.bf_start_pause_btn, self.bf_stop_btn, self.bf_quick_btn):
			btn.setMinimumHeight(44)
			btn_layout.addWidget(btn)
		layout.addLayout(btn_layout)
		layout.addLayout(self._build_manual_row(self._bf_manual_save))

		layout.addWidget(QLabel(self.t('summary_24h')))
		self.bf_timeline = TimelineChart(self.t)
		layout.addWidget(self.bf_timeline)
		layout.addWidget(QLabel(self.t('today')))
		self.bf_today_list = QListWidget()
		layout.addWidget(self.bf_today_list)
		w.setLayout(layout)

		timer = self.bf_service.timer
		timer.tick.connect(lambda secs: self.bf_timer_label.setText(fmt_mmss(secs)))
		timer.state_changed.connect(self._on_bf_state)
		timer.committed.connect(lambda _entry: self._refresh_breastfeeding())
		self.bf_start_pause_btn.clicked.connect(self._bf_start_pause)
		self.bf_stop_btn.clicked.connect(lambda: self._guard(self.bf_service.stop))
		self.bf_quick_btn.clicked.connect(self._bf_quick_log)
		self._on_bf_state('idle')
		return w

	def _selected_side(self):
		for side, btn in self.side_buttons.items():
			if btn.isChecked():
				return side
		return self.bf_service.next_side()

	def _bf_start_pause(self):
		timer = self.bf_service.timer
		if timer.running and not timer.paused:
			self._guard(self.bf_service.pause)
		else:
			self._guard(self.bf_service.start, self._selected_side())

	def _bf_quick_log(self):
		if self._guard(self.bf_service.quick_log, self._selected_side()) is not None:
			self._refresh_breastfeeding()

	def _bf_manual_save(self, start, end):
		if self._guard(self.bf_service.add_manual, start, end, self._selected_side()) is not None:
			self._refresh_breastfeeding()

	def _on_bf_state(self, state):
		for btn in self.side_buttons.values():
			btn.setEnabled(state == 'idle')
		self.bf_stop_btn.setEnabled(state != 'idle')
		if state == 'running':
			self.bf_start_pause_btn.setText(self.t('pause'))
		elif state == 'paused':
			self.bf_start_pause_btn.setText(self.t('resume'))
		else:
			self.bf_start_pause_btn.setText(self.t('start'))
			self.bf_timer_label.setText("0:00")

	def _refresh_breastfeeding(self):
		store = self.stores[ToolKind.BREASTFEEDING]
		suggested = self.bf_service.next_side()
		if not self.bf_service.timer.running:
			self.side_buttons[suggested].setChecked(True)
		self.next_side_label.setText(f"{self.t('next_side')}: {self.t('side_' + suggested)}")
		logs = store.all()
		events = events_from_logs(
			logs,
			color_fn=lambda l: COLORS['side_' + l.payload.side],
			label_fn=lambda l: l.payload.side,
		)
		self.bf_timeline.show_events(self._mapper(), events)
		self.bf_today_list.clear()
		today = store.by_date(datetime.date.today())
		if not today:
			self.bf_today_list.addItem(self.t('no_logs'))
		for log in today:
			when = from_ms(log.timestamp).strftime("%H:%M")
			self.bf_today_list.addItem(f"{log.payload.side}  {fmt_mmss(log.duration_seconds or 0)}  ·  {when}")
		self._refresh_summary()

	# --- Bottle ---

	def _build_bottle_tab(self):
		w = QWidget()
		layout = QVBoxLayout()
		layout.setContentsMargins(32, 24, 32, 16)

		form = QHBoxLayout()
		self.amount_spin = QSpinBox()
		self.amount_spin.setRange(10, 500)
		self.amount_spin.setSingleStep(10)
		self.amount_spin.setValue(120)
		self.amount_spin.setSuffix(" ml")
		self.type_combo = QComboBox()
		for kind in FEEDING_TYPES:
			self.type_combo.addItem(self.t(kind), kind)
		save_btn = QPushButton(self.t('save'))
		save_btn.setMinimumHeight(44)
		save_btn.clicked.connect(self._bottle_save)
		form.addWidget(self.amount_spin)
		form.addWidget(self.type_combo)
		form.addWidget(save_btn)
		layout.addLayout(form)

		self.milk_total_label = QLabel("")
		self.milk_total_label.setObjectName("TotalLabel")
		layout.addWidget(self.milk_total_label)
		layout.addWidget(QLabel(self.t('today')))
		self.bottle_today_list = QListWidget()
		layout.addWidget(self.bottle_today_list)
		w.setLayout(layout)
		return w

	def _bottle_save(self):
		entry = self._guard(self.feeding_service.log_feeding, self.amount_spin.value(), self.type_combo.currentData())
		if entry is not None:
			self._refresh_bottle()

	def _refresh_bottle(self):
		self.milk_total_label.setText(f"{self.t('milk_today')}: {self.feeding_service.milk_total_today():g} ml")
		self.bottle_today_list.clear()
		today = self.stores[ToolKind.BOTTLE].by_date(datetime.date.today())
		if not today:
			self.bottle_today_list.addItem(self.t('no_logs'))
		for log in today:
			when = from_ms(log.timestamp).strftime("%H:%M")
			self.bottle_today_list.addItem(f"{log.payload.amount:g}{log.payload.unit}  {self.t(log.payload.type)}  ·  {when}")
		self._refresh_summary()

	# --- Sleep ---

	def _build_sleep_tab(self):
		w = QWidget()
		layout = QVBoxLayout()
		layout.setContentsMargins(32, 24, 32, 16)

		self.sleep_status_label = QLabel("")
		self.sleep_status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
		self.sleep_status_label.setObjectName("StatusLabel")
		layout.addWidget(self.sleep_status_label)
		self.sleep_timer_label = QLabel("")
		self.sleep_timer_label.setObjectName("TimerLabel")
		self.sleep_timer_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
		layout.addWidget(self.sleep_timer_label)

		self.sleep_btn = QPushButton("")
		self.sleep_btn.setObjectName("SleepBtn")
		self.sleep_btn.setFixedSize(160, 160)
		btn_row = QHBoxLayout()
		btn_row.addStretch()
		btn_row.addWidget(self.sleep_btn)
		btn_row.addStretch()
		layout.addLayout(btn_row)
		layout.addLayout(self._build_manual_row(self._sleep_manual_save))

		layout.addWidget(QLabel(self.t('summary_24h')))
		self.sleep_timeline = TimelineChart(self.t)
		layout.addWidget(self.sleep_timeline)
		layout.addWidget(QLabel(self.t('recent_history')))
		self.sleep_history_list = QListWidget()
		layout.addWidget(self.sleep_history_list)
		w.setLayout(layout)

		self.sleep_btn.clicked.connect(lambda: self._guard(self.sleep_service.toggle))
		self.sleep_service.tick.connect(self._on_sleep_tick)
		self.sleep_service.state_changed.connect(lambda _state: self._refresh_sleep())
		return w

	def _sleep_manual_save(self, start, end):
		if self._guard(self.sleep_service.add_manual, start, end) is not None:
			self._refresh_sleep()

	def _on_sleep_tick(self, secs):
		self.sleep_timer_label.setText(fmt_hms(secs))
		self._render_sleep_timeline()

	def _render_sleep_timeline(self):
		events = events_from_logs(
			self.stores[ToolKind.SLEEP].all(),
			color_fn=lambda l: COLORS['sleep_live'] if l.is_open else COLORS['sleep'],
		)
		self.sleep_timeline.show_events(self._mapper(), events)

	def _refresh_sleep(self):
		sleeping = self.sleep_service.is_sleeping
		self.sleep_status_label.setText(self.t('asleep') if sleeping else self.t('awake'))
		self.sleep_btn.setText(self.t('wake_action') if sleeping else self.t('sleep_action'))
		self.sleep_timer_label.setText(fmt_hms(self.sleep_service.elapsed_seconds()) if sleeping else "")
		self._render_sleep_timeline()
		self.sleep_history_list.clear()
		finished = [l for l in self.stores[ToolKind.SLEEP].all() if l.end_time is not None]
		if not finished:
			self.sleep_history_list.addItem(self.t('no_logs'))
		for log in finished[:30]:
			start = from_ms(log.timestamp)
			end = from_ms(log.end_time)
			self.sleep_history_list.addItem(
				f"{fmt_hms((log.end_time - log.timestamp) // 1000)}  {start:%H:%M} - {end:%H:%M}  ·  {start:%d/%m}"
			)
		self._refresh_summary()

	# --- Trends ---

	def _build_trends_tab(self):
		w = QWidget()
		layout = QVBoxLayout()
		layout.setAlignment(Qt.AlignmentFlag.AlignTop)
		layout.setContentsMargins(32, 24, 32, 16)
		self.sleep_trend_chart = TrendChart()
		self.milk_trend_chart = TrendChart()
		self.bf_trend_chart = TrendChart()
		self.last_days_strip = LastDaysStrip()
		self.streak_label = QLabel("")
		self.streak_label.setObjectName("TotalLabel")
		layout.addWidget(self.sleep_trend_chart)
		layout.addWidget(self.milk_trend_chart)
		layout.addWidget(self.bf_trend_chart)
		layout.addWidget(self.last_days_strip)
		layout.addWidget(self.streak_label)
		w.setLayout(layout)
		return w

	def _refresh_trends(self):
		days = int(self.settings["trend_days"])
		sleep_logs = self.stores[ToolKind.SLEEP].all()
		bottle_logs = self.stores[ToolKind.BOTTLE].all()
		bf_logs = self.stores[ToolKind.BREASTFEEDING].all()
		self.sleep_trend_chart.show_trend(
			aggregator.trend(sleep_logs, days, aggregator.sleep_minutes),
			self.t('sleep_minutes'), self.settings["trend_floor_minutes"], COLORS['sleep'],
		)
		self.milk_trend_chart.show_trend(
			aggregator.trend(bottle_logs, days, aggregator.feeding_volume),
			self.t('milk_volume'), 100, COLORS['bottle'],
		)
		self.bf_trend_chart.show_trend(
			aggregator.trend(bf_logs, days, aggregator.session_count),
			self.t('sessions_per_day'), 4, COLORS['side_L'],
		)
		all_logs = sleep_logs + bottle_logs + bf_logs
		self.last_days_strip.show_statuses(aggregator.day_statuses(all_logs, days), self.t('last_days'))
		self.streak_label.setText(f"{self.t('streak')}: {aggregator.daily_streak(all_logs)}")

	# --- Shared ---

	def _mapper(self):
		return TimelineMapper(
			now=now_ms(),
			mode=self.settings["timeline_mode"],
			forward_buffer=self.settings["forward_buffer"],
			min_width=self.settings["min_bar_width"],
		)

	def _refresh_summary(self):
		now = now_ms()
		latest_bf = self.stores[ToolKind.BREASTFEEDING].latest()
		if latest_bf is None:
			self.footer.set_text('breastfeeding', f"{self.t('breastfeeding')}: {self.t('no_logs')}")
		else:
			self.footer.set_text('breastfeeding', f"{self.t('side_' + latest_bf.payload.side)} · {self.t('ago')} {fmt_since(now - latest_bf.timestamp)}")
		latest_bottle = self.stores[ToolKind.BOTTLE].latest()
		if latest_bottle is None:
			self.footer.set_text('bottle', f"{self.t('bottle')}: {self.t('no_logs')}")
		else:
			p = latest_bottle.payload
			self.footer.set_text('bottle', f"{p.amount:g}{p.unit} · {self.t('ago')} {fmt_since(now - latest_bottle.timestamp)}")
		latest_sleep = self.stores[ToolKind.SLEEP].latest()
		if latest_sleep is None:
			self.footer.set_text('sleep', f"{self.t('sleep')}: {self.t('no_logs')}")
		elif latest_sleep.is_open:
			self.footer.set_text('sleep', f"{self.t('asleep')} · {self.t('for')} {fmt_since(now - latest_sleep.timestamp)}")
		else:
			self.footer.set_text('sleep', f"{self.t('awake')} · {self.t('ago')} {fmt_since(now - latest_sleep.end_time)}")

	def _refresh_all(self):
		self._refresh_breastfeeding()
		self._refresh_bottle()
		self._refresh_sleep()
		self._refresh_trends()
