import matplotlib
matplotlib.use('Agg')

from familysync.charts import create_pie_chart, create_weekday_bar_chart


def test_pie_chart_written(tmp_path):
    fn = tmp_path / 'categories.png'
    wedges, texts, autotexts = create_pie_chart([180, 105], ['sports', 'creative'], str(fn),
                                                return_handles=True, subtitle='Minutes per week')
    assert fn.exists()
    assert len(wedges) == 2


def test_pie_chart_without_data(tmp_path):
    fn = tmp_path / 'empty.png'
    assert create_pie_chart([0, 0], ['a', 'b'], str(fn), return_handles=True) == ([], [], [])
    assert fn.exists()


def test_weekday_bar_chart(tmp_path):
    fn = tmp_path / 'days.png'
    create_weekday_bar_chart({'monday': 2, 'saturday': 1}, str(fn))
    assert fn.exists() and fn.stat().st_size > 0
