# Design tokens for NanApp UI

COLORS = {
    'surface': '#1E293B',
    'text': '#E2E8F0',
    'text_muted': '#64748B',
    'border': '#334155',
    'footer_bg': '#1E293B',
    'footer_text': '#E2E8F0',
    'side_L': '#EC4899',
    'side_R': '#A855F7',
    'sleep': '#6366F1',
    'sleep_live': '#818CF8',
    'bottle': '#3B82F6',
    'completed': '#10B981',
    'none': '#334155',
}
