# Display strings. The backend never sees these; it only gets keys resolved here.

STRINGS = {
	'es': {
		'breastfeeding': 'Lactancia',
		'bottle': 'Biberón',
		'sleep': 'Sueño',
		'trends': 'Tendencias',
		'start': 'Iniciar',
		'pause': 'Pausa',
		'resume': 'Reanudar',
		'stop': 'Terminar',
		'quick_log': 'Registro rápido',
		'manual_entry': 'Entrada manual',
		'save': 'Guardar',
		'saved': 'Guardado',
		'side_L': 'Izq',
		'side_R': 'Der',
		'next_side': 'Siguiente lado',
		'no_logs': 'Sin registros',
		'today': 'Hoy',
		'summary_24h': 'Resumen 24h',
		'now': 'Ahora',
		'sessions_per_day': 'Tomas por día',
		'streak': 'Días seguidos',
		'asleep': 'Durmiendo',
		'awake': 'Despierto',
		'sleep_action': 'Dormir',
		'wake_action': 'Despertar',
		'ago': 'Hace',
		'for': 'Lleva',
		'recent_history': 'Historial reciente',
		'milk_today': 'Leche hoy',
		'formula': 'Fórmula',
		'breastmilk': 'Materna',
		'cow': 'Vaca',
		'water': 'Agua',
		'sleep_minutes': 'Minutos de sueño',
		'milk_volume': 'Volumen de leche (ml)',
		'last_days': 'Últimos días',
		'start_time': 'Inicio',
		'end_time': 'Fin',
	},
	'en': {
		'breastfeeding': 'Breastfeeding',
		'bottle': 'Bottle',
		'sleep': 'Sleep',
		'trends': 'Trends',
		'start': 'Start',
		'pause': 'Pause',
		'resume': 'Resume',
		'stop': 'Stop',
		'quick_log': 'Quick log',
		'manual_entry': 'Manual entry',
		'save': 'Save',
		'saved': 'Saved',
		'side_L': 'Left',
		'side_R': 'Right',
		'next_side': 'Next side',
		'no_logs': 'No logs',
		'today': 'Today',
		'summary_24h': 'Last 24h',
		'now': 'Now',
		'sessions_per_day': 'Feeds per day',
		'streak': 'Day streak',
		'asleep': 'Sleeping',
		'awake': 'Awake',
		'sleep_action': 'Sleep',
		'wake_action': 'Wake up',
		'ago': 'Ago',
		'for': 'For',
		'recent_history': 'Recent history',
		'milk_today': 'Milk today',
		'formula': 'Formula',
		'breastmilk': 'Breast milk',
		'cow': 'Cow',
		'water': 'Water',
		'sleep_minutes': 'Sleep minutes',
		'milk_volume': 'Milk volume (ml)',
		'last_days': 'Last days',
		'start_time': 'Start',
		'end_time': 'End',
	},
}

def make_translator(language):
	"""Return t(key) for `language`; unknown keys come back unchanged."""
	table = STRINGS.get(language, STRINGS['es'])
	def t(key):
		return table.get(key, key)
	return t
