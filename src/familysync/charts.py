# src/familysync/charts.py

import matplotlib.pyplot as plt

from familysync.recurrence import DAY_NAMES


def create_pie_chart(values: list[int], labels: list[str], filename: str, colors: list[str] = None, return_handles: bool = False, subtitle: str = None):
    """
    Erstellt ein Tortendiagramm und speichert es als PNG.
    :param values: Liste der Werte (z.B. Minuten je Kategorie).
    :param labels: Zugehörige Labels (z.B. ["sports","creative"]).
    :param filename: Pfad zur Ausgabedatei, z.B. "categories.png".
    :param colors: (Optional) Liste von Farben für die Segmente.
    :param return_handles: Wenn True, gibt (wedges, texts, autotexts) zurück.
    :param subtitle: (Optional) Text, der unter das Diagramm geschrieben wird.
    """
    total = sum(values)
    # Ohne Daten ein kleines Platzhalter-Bild anlegen
    if total == 0:
        fig, ax = plt.subplots()
        ax.text(0.5, 0.5, "No data", ha="center", va="center", fontsize=14)
        ax.axis("off")
        if subtitle:
            fig.text(0.5, 0.02, subtitle, ha="center", va="bottom", fontsize=16, fontweight='bold')
        fig.savefig(filename, bbox_inches="tight")
        plt.close(fig)
        if return_handles:
            return [], [], []
        return

    fig, ax = plt.subplots()
    if colors is not None:
        wedges, texts, autotexts = ax.pie(values, labels=labels, autopct="%1.1f%%", colors=colors)
    else:
        wedges, texts, autotexts = ax.pie(values, labels=labels, autopct="%1.1f%%")
    ax.axis("equal")
    if subtitle:
        fig.text(0.5, 0.02, subtitle, ha="center", va="bottom", fontsize=16, fontweight='bold')
    fig.savefig(filename, bbox_inches="tight")
    plt.close(fig)
    if return_handles:
        return wedges, texts, autotexts


def create_weekday_bar_chart(counts: dict, filename: str, title: str = 'Activities per day'):
    """Balkendiagramm Montag bis Sonntag aus einem {weekday: count}-Mapping."""
    days = list(DAY_NAMES)
    x = [DAY_NAMES[d]['short'] for d in days]
    y = [counts.get(d, 0) for d in days]
    fig, ax = plt.subplots(figsize=(5, 2.5))
    ax.bar(x, y, color='#1976d2')
    ax.set_title(title)
    ax.set_ylabel('Activities')
    ax.grid(True, axis='y', linestyle=':')
    fig.tight_layout()
    fig.savefig(filename, bbox_inches='tight')
    plt.close(fig)
